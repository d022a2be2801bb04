"""Custom exceptions for the order service."""


class OrderServiceError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class FieldError:
    """A single field-tagged validation failure."""
    __slots__ = ('field', 'error')

    def __init__(self, field, error):
        self.field = field
        self.error = str(error)

    def to_dict(self):
        return {'field': self.field, 'error': self.error}

    def __eq__(self, other):
        if not isinstance(other, FieldError):
            return NotImplemented
        return (self.field, self.error) == (other.field, other.error)

    def __repr__(self):
        return f"<FieldError(field={self.field!r}, error={self.error!r})>"


class ValidationError(OrderServiceError):
    """Raised for malformed or out-of-range input."""
    def __init__(self, message, fields=None, status_code=400):
        super().__init__(message, status_code)
        self.fields = list(fields or [])

    @classmethod
    def for_field(cls, field, error):
        """Build an error for one offending field."""
        return cls(f"{field}: {error}", fields=[FieldError(field, error)])

    def to_dict(self):
        rv = super().to_dict()
        if self.fields:
            rv['fields'] = [f.to_dict() for f in self.fields]
        return rv


class NotFoundError(OrderServiceError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class UnauthorizedError(OrderServiceError):
    """Raised when the caller identity is missing or rejected."""
    def __init__(self, message="Unauthorized access"):
        super().__init__(message, 401)


class StoreError(OrderServiceError):
    """Raised when the underlying persistence layer fails."""
    def __init__(self, message, operation=None):
        super().__init__(message, 500)
        self.operation = operation

    def to_dict(self):
        # Never leak database details to the client.
        return {'status': 'error', 'message': 'Internal Server Error'}


class RequestCancelledError(OrderServiceError):
    """Raised when the request deadline expired or the request was cancelled."""
    def __init__(self, message="Request cancelled"):
        super().__init__(message, 499)


class TransactionClosedError(RuntimeError):
    """A transaction handle was used after commit/rollback or outside its owner thread.

    This is a programming fault, not a recoverable business error.
    """
