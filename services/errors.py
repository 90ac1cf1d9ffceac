"""
Domain errors raised by the repositories and translated to HTTP responses by the API layer.
"""


class CRMError(Exception):
    """Base class for business-rule failures."""
    status_code = 400

    def __init__(self, message, field=None):
        self.message = message
        self.field = field
        super().__init__(message)


class NotFoundError(CRMError):
    """A referenced record does not exist."""
    status_code = 404


class ConflictError(CRMError):
    """The operation is not allowed in the record's current state."""
    status_code = 409


class PermissionDeniedError(CRMError):
    """
    The current user may not perform an operation.

    Carries the context needed to explain the denial: the resource path,
    the attempted operation and the payload that was sent.
    """
    status_code = 403

    def __init__(self, path, operation, request_resource_data=None, message=None):
        self.path = path
        self.operation = operation
        self.request_resource_data = request_resource_data
        super().__init__(
            message or f"Missing or insufficient permissions: {operation} on {path}"
        )

    def to_dict(self):
        return {
            'path': self.path,
            'operation': self.operation,
            'request_resource_data': self.request_resource_data,
        }
