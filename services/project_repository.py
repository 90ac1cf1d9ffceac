"""
Project Repository - scheduled jobs and their links to a quote and a purchase order.
"""

import logging
from datetime import datetime
from typing import Optional, Dict
from sqlalchemy.orm import Session

from database.models import Project, Quote, PurchaseOrder, PROJECT_STATUSES
from services.errors import NotFoundError
from services.pagination import apply_search, apply_updated_since, paginate
from services.purchase_order_repository import PurchaseOrderRepository
from services.quote_repository import QuoteRepository
from validators import validate_project, validate_status

logger = logging.getLogger(__name__)

# Link kind -> (project column, linked model)
LINKS = {
    'quote': ('quote_id', Quote),
    'purchase_order': ('purchase_order_id', PurchaseOrder),
}


class ProjectRepository:
    """Repository for projects."""

    def __init__(self, session: Session, settings: Dict = None, user_id: str = None):
        self.session = session
        self.settings = settings or {}
        self.user_id = user_id

    def _serialize(self, project: Project) -> Dict:
        return project.to_dict(include_links=True)

    def list_projects(self, status: str = None, priority: str = None, search: str = None,
                      page: int = 1, per_page: int = 50, updated_since: datetime = None) -> Dict:
        """List projects, newest first."""
        query = self.session.query(Project)
        if status:
            query = query.filter(Project.status == status)
        if priority:
            query = query.filter(Project.priority == priority)
        query = apply_search(
            query, [Project.client, Project.description, Project.responsible], search
        )
        query = apply_updated_since(query, Project, updated_since)
        query = query.order_by(Project.created_at.desc())
        return paginate(query, page, per_page, serializer=self._serialize)

    def get_project(self, project_id: str) -> Optional[Dict]:
        project = self.session.get(Project, project_id)
        return self._serialize(project) if project else None

    def create_project(self, data: Dict) -> Dict:
        project = Project(**validate_project(data))
        for kind, (column, _) in LINKS.items():
            if data.get(column):
                self._check_target(kind, data[column])
                setattr(project, column, data[column])
        self.session.add(project)
        self.session.flush()
        logger.info(f"Created project: {project.id}")
        return self._serialize(project)

    def update_project(self, project_id: str, data: Dict) -> Optional[Dict]:
        project = self.session.get(Project, project_id)
        if not project:
            return None

        cleaned = validate_project({**project.to_dict(), **data})
        for key, value in cleaned.items():
            setattr(project, key, value)

        project.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated project: {project_id}")
        return self._serialize(project)

    def update_status(self, project_id: str, status: str) -> Optional[Dict]:
        project = self.session.get(Project, project_id)
        if not project:
            return None
        project.status = validate_status(status, PROJECT_STATUSES)
        project.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Project {project_id} status -> {status}")
        return self._serialize(project)

    def delete_project(self, project_id: str) -> bool:
        """Delete a project. Linked documents are kept."""
        project = self.session.get(Project, project_id)
        if not project:
            return False
        self.session.delete(project)
        self.session.flush()
        logger.info(f"Deleted project: {project_id}")
        return True

    # =========================================================================
    # LINKS
    # =========================================================================

    def _check_target(self, kind: str, target_id: str):
        _, model = LINKS[kind]
        if not self.session.get(model, target_id):
            raise NotFoundError(f"{kind.replace('_', ' ').capitalize()} not found: {target_id}", f"{kind}_id")

    def link(self, project_id: str, kind: str, target_id: str) -> Optional[Dict]:
        """Attach an existing quote or purchase order to the project."""
        project = self.session.get(Project, project_id)
        if not project:
            return None
        self._check_target(kind, target_id)
        column, _ = LINKS[kind]
        setattr(project, column, target_id)
        project.updated_at = datetime.utcnow()
        self.session.flush()
        self.session.expire(project, ['quote', 'purchase_order'])
        logger.info(f"Linked {kind} {target_id} to project {project_id}")
        return self._serialize(project)

    def unlink(self, project_id: str, kind: str) -> Optional[Dict]:
        project = self.session.get(Project, project_id)
        if not project:
            return None
        column, _ = LINKS[kind]
        setattr(project, column, None)
        project.updated_at = datetime.utcnow()
        self.session.flush()
        self.session.expire(project, ['quote', 'purchase_order'])
        logger.info(f"Unlinked {kind} from project {project_id}")
        return self._serialize(project)

    def create_and_link(self, project_id: str, kind: str, data: Dict) -> Optional[Dict]:
        """
        Create a new quote or purchase order and link it, in one transaction.

        Returns:
            Dict with the project and the created document
        """
        project = self.session.get(Project, project_id)
        if not project:
            return None

        if kind == 'quote':
            payload = {'client_name': project.client, **data}
            document = QuoteRepository(self.session, self.settings, self.user_id).create_quote_model(payload)
        else:
            document = PurchaseOrderRepository(
                self.session, self.settings, self.user_id
            ).create_purchase_order_model(data)

        column, _ = LINKS[kind]
        setattr(project, column, document.id)
        project.updated_at = datetime.utcnow()
        self.session.flush()
        self.session.expire(project, ['quote', 'purchase_order'])
        logger.info(f"Created {kind} {document.display_number} for project {project_id}")
        return {'project': self._serialize(project), kind: document.to_dict()}
