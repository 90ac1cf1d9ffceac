"""
Helper utility functions shared by the API blueprints.
"""

from datetime import datetime, timezone

from flask import current_app, request

from validators import ValidationError


def get_json_body():
    """
    Return the request JSON object.

    Raises:
        ValidationError: If the body is missing or not a JSON object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def get_pagination_args():
    """
    Read page/per_page query arguments, clamped to the configured limits.

    Returns:
        Tuple of (page, per_page)
    """
    default_per_page = current_app.config.get('DEFAULT_PER_PAGE', 50)
    max_per_page = current_app.config.get('MAX_PER_PAGE', 200)
    try:
        page = int(request.args.get('page', 1))
        per_page = int(request.args.get('per_page', default_per_page))
    except (TypeError, ValueError):
        raise ValidationError("page and per_page must be integers", 'page')
    return max(page, 1), min(max(per_page, 1), max_per_page)


def get_updated_since():
    """Parse the optional updated_since filter (ISO timestamp)."""
    value = request.args.get('updated_since')
    if not value:
        return None
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError("updated_since must be an ISO 8601 timestamp", 'updated_since')
    # stored timestamps are naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def notification(title, description, variant='default'):
    """Toast payload shown by the front-end after an operation."""
    return {'title': title, 'description': description, 'variant': variant}
