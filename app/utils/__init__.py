"""
Utilities Package

Shared helper functions used across the API blueprints.
"""

from app.utils.helpers import (
    get_json_body,
    get_pagination_args,
    get_updated_since,
    notification,
)

__all__ = [
    'get_json_body',
    'get_pagination_args',
    'get_updated_since',
    'notification',
]
