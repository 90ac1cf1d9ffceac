"""
Projects Routes Blueprint (admin only)

- /api/projects: Project management
- /api/projects/<id>/status: Status transitions
- /api/projects/<id>/link: Link an existing quote or purchase order
- /api/projects/<id>/link/<kind>: Remove a link
- /api/projects/<id>/<kind>: Create a quote or purchase order already linked to the project
"""

import logging
from flask import Blueprint, current_app, request

from auth import admin_required, get_current_user_id
from database.connection import get_db_session
from services.project_repository import ProjectRepository, LINKS
from validators import ValidationError
from app.api.responses import ok, not_found, api_error
from app.utils.helpers import get_json_body, get_pagination_args, get_updated_since

logger = logging.getLogger(__name__)

projects_bp = Blueprint('projects_bp', __name__)

NOT_FOUND = 'Proyecto no encontrado.'

KIND_LABELS = {
    'quote': 'Cotización',
    'purchase_order': 'Orden de compra',
}

# URL segment -> link kind
KIND_SEGMENTS = {
    'quote': 'quote',
    'quotes': 'quote',
    'purchase-order': 'purchase_order',
    'purchase-orders': 'purchase_order',
    'purchase_order': 'purchase_order',
}


def _repository(db):
    return ProjectRepository(db, current_app.config, get_current_user_id())


def _kind(value):
    kind = KIND_SEGMENTS.get(value or '')
    if kind not in LINKS:
        raise ValidationError(f"Must be one of: {', '.join(LINKS)}", 'kind')
    return kind


@projects_bp.route('/api/projects', methods=['GET'])
@admin_required
def list_projects():
    try:
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = _repository(db).list_projects(
                status=request.args.get('status'),
                priority=request.args.get('priority'),
                search=request.args.get('search'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing projects")


@projects_bp.route('/api/projects', methods=['POST'])
@admin_required
def create_project():
    try:
        data = get_json_body()
        with get_db_session() as db:
            project = _repository(db).create_project(data)
        return ok({'project': project}, 201, 'Proyecto creado', f"Proyecto para {project['client']} creado.")
    except Exception as e:
        return api_error(e, "creating project")


@projects_bp.route('/api/projects/<project_id>', methods=['GET'])
@admin_required
def get_project(project_id):
    """Project detail with the linked quote and purchase order summaries"""
    try:
        with get_db_session() as db:
            project = _repository(db).get_project(project_id)
        if not project:
            return not_found(NOT_FOUND)
        return ok({'project': project})
    except Exception as e:
        return api_error(e, f"getting project {project_id}")


@projects_bp.route('/api/projects/<project_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_project(project_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            project = _repository(db).update_project(project_id, data)
        if not project:
            return not_found(NOT_FOUND)
        return ok({'project': project}, title='Proyecto actualizado', description=project['client'])
    except Exception as e:
        return api_error(e, f"updating project {project_id}")


@projects_bp.route('/api/projects/<project_id>/status', methods=['PATCH', 'PUT'])
@admin_required
def update_project_status(project_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            project = _repository(db).update_status(project_id, data.get('status'))
        if not project:
            return not_found(NOT_FOUND)
        return ok(
            {'project': project}, title='Estado actualizado',
            description=f"El proyecto ahora está {project['status']}."
        )
    except Exception as e:
        return api_error(e, f"updating project status {project_id}")


@projects_bp.route('/api/projects/<project_id>', methods=['DELETE'])
@admin_required
def delete_project(project_id):
    try:
        with get_db_session() as db:
            deleted = _repository(db).delete_project(project_id)
        if not deleted:
            return not_found(NOT_FOUND)
        return ok(title='Proyecto eliminado', description='El proyecto fue eliminado.')
    except Exception as e:
        return api_error(e, f"deleting project {project_id}")


# ============================================================================
# LINKS
# ============================================================================

@projects_bp.route('/api/projects/<project_id>/link', methods=['POST'])
@admin_required
def link_document(project_id):
    """Link an existing document: {"kind": "quote"|"purchase_order", "target_id": ...}"""
    try:
        data = get_json_body()
        kind = _kind(data.get('kind'))
        target_id = data.get('target_id')
        if not target_id:
            raise ValidationError("target_id is required", 'target_id')
        with get_db_session() as db:
            project = _repository(db).link(project_id, kind, target_id)
        if not project:
            return not_found(NOT_FOUND)
        return ok(
            {'project': project}, title='Documento vinculado',
            description=f"{KIND_LABELS[kind]} vinculada al proyecto."
        )
    except Exception as e:
        return api_error(e, f"linking document to project {project_id}")


@projects_bp.route('/api/projects/<project_id>/link/<kind>', methods=['DELETE'])
@admin_required
def unlink_document(project_id, kind):
    try:
        kind = _kind(kind)
        with get_db_session() as db:
            project = _repository(db).unlink(project_id, kind)
        if not project:
            return not_found(NOT_FOUND)
        return ok(
            {'project': project}, title='Vínculo eliminado',
            description=f"{KIND_LABELS[kind]} desvinculada del proyecto."
        )
    except Exception as e:
        return api_error(e, f"unlinking document from project {project_id}")


@projects_bp.route('/api/projects/<project_id>/<kind>', methods=['POST'])
@admin_required
def create_linked_document(project_id, kind):
    """Create a quote or purchase order and link it in the same transaction"""
    try:
        kind = _kind(kind)
        data = get_json_body()
        with get_db_session() as db:
            result = _repository(db).create_and_link(project_id, kind, data)
        if not result:
            return not_found(NOT_FOUND)
        return ok(
            result, 201, f"{KIND_LABELS[kind]} creada",
            f"{result[kind]['display_number']} vinculada al proyecto."
        )
    except Exception as e:
        return api_error(e, f"creating {kind} for project {project_id}")
