"""Domain errors raised by the services and translated to HTTP in main."""


class CouponGenError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CouponGenError):
    """Malformed input; the caller must correct it."""


class NotFoundError(CouponGenError):
    """Referenced entity does not exist in the requesting tenant."""


class AlreadyUsedError(CouponGenError):
    """Single-use resource (form link, coupon) already consumed."""


class RetryableStorageError(CouponGenError):
    """Transient storage conflict; safe for the caller to retry."""


class FormLinkInvalidError(ValidationError, NotFoundError):
    """Submitted form token is unknown or belongs to another tenant/campaign."""

    def __init__(self, message: str = "Link not found or invalid"):
        super().__init__(message)


class FormLinkAlreadyUsedError(ValidationError, AlreadyUsedError):
    """Submitted form token was consumed by an earlier submission."""

    def __init__(self, message: str = "Link already used"):
        super().__init__(message)
