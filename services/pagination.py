"""
Query helpers shared by the repositories: text search, change filters and pagination.
"""

from sqlalchemy import or_


def apply_search(query, columns, search):
    """Case-insensitive substring match over any of the given columns. % and _ match literally."""
    if not search:
        return query
    term = search.strip()
    return query.filter(or_(*[column.icontains(term, autoescape=True) for column in columns]))


def apply_updated_since(query, model, updated_since):
    """Only rows created or changed after the given timestamp."""
    if not updated_since:
        return query
    return query.filter(model.updated_at > updated_since)


def paginate(query, page=1, per_page=50, serializer=None):
    """
    Apply offset/limit to a SQLAlchemy query.

    Returns:
        Dict with items, total, page, per_page and pages
    """
    page = max(int(page or 1), 1)
    per_page = max(int(per_page or 50), 1)
    total = query.count()
    rows = query.offset((page - 1) * per_page).limit(per_page).all()
    serializer = serializer or (lambda row: row.to_dict())
    return {
        'items': [serializer(row) for row in rows],
        'total': total,
        'page': page,
        'per_page': per_page,
        'pages': (total + per_page - 1) // per_page if total else 0,
    }
