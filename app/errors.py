"""Error kinds raised by services and rendered by the API exception handler.

Every error carries a message key from the catalog in ``app.i18n`` rather
than a rendered message; the handler picks the text for the request locale.
"""


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    message_key: str = "internal_error"

    def __init__(self, message_key: str | None = None) -> None:
        if message_key is not None:
            self.message_key = message_key
        super().__init__(self.message_key)


class ValidationError(ApiError):
    """Field-level validation failure. ``errors`` maps field name to message key."""

    status_code = 400
    message_key = "validation_failure"

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__()
        self.errors = errors


class InvalidTokenError(ApiError):
    status_code = 400
    message_key = "account_activation_failure"


class AuthenticationError(ApiError):
    status_code = 401
    message_key = "authentication_failure"


class ForbiddenError(ApiError):
    status_code = 403
    message_key = "unauthorized_user_update"


class NotFoundError(ApiError):
    status_code = 404
    message_key = "user_not_found"


class EmailDeliveryError(ApiError):
    """The mail server refused or could not be reached."""

    status_code = 502
    message_key = "email_failure"
