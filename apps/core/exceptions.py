"""
Custom exceptions for the GreenZest storefront

Domain services raise these; the API exception handler turns them into
JSON responses using ``status_code`` and ``code``.
"""


class GreenZestException(Exception):
    """Base exception for all GreenZest errors"""
    status_code = 500

    def __init__(self, message: str, code: str = "GREENZEST_ERROR", status_code: int = None):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationException(GreenZestException):
    """Exception raised for validation errors"""
    status_code = 400

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR"
        )


class InvalidCredentialsException(GreenZestException):
    """Unknown email or wrong password - same message for both"""
    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message, code="INVALID_CREDENTIALS")


class AccountDisabledException(GreenZestException):
    """Login attempted on a deactivated account"""
    status_code = 401

    def __init__(self, message: str = "This account has been deactivated"):
        super().__init__(message=message, code="ACCOUNT_DISABLED")


class AccountLockedException(GreenZestException):
    """Login refused while the lockout window is open"""
    status_code = 423

    def __init__(self, lock_until=None):
        self.lock_until = lock_until
        super().__init__(
            message="Account temporarily locked after too many failed attempts. Try again later.",
            code="ACCOUNT_LOCKED"
        )


class PermissionDeniedException(GreenZestException):
    """Exception raised when the acting user may not perform an operation"""
    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message=message, code="FORBIDDEN")


class NotFoundException(GreenZestException):
    """Exception raised when a record does not exist (or is not visible)"""
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(message=f"{resource} not found", code="NOT_FOUND")


class ConflictException(GreenZestException):
    """Exception raised when an operation conflicts with existing state"""
    status_code = 400

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message=message, code=code)


class DuplicateEmailException(ConflictException):
    """Signup or admin creation with an email that is already registered"""
    def __init__(self, email: str = None):
        self.email = email
        super().__init__(
            message="A user with this email already exists",
            code="DUPLICATE_EMAIL"
        )


class InvalidTransitionException(ConflictException):
    """Order status change not permitted from the current status"""
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            message=f"Cannot change order status from '{current}' to '{requested}'",
            code="INVALID_TRANSITION"
        )


class InsufficientStockException(ConflictException):
    """Order line asks for more units than are in stock"""
    def __init__(self, product_name: str, available: int):
        self.product_name = product_name
        self.available = available
        super().__init__(
            message=f"Insufficient stock for {product_name} (available: {available})",
            code="INSUFFICIENT_STOCK"
        )
