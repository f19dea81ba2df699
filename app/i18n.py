"""Message catalog and Accept-Language negotiation.

The catalog is a plain mapping of locale -> message key -> text. Callers
resolve a locale once per request with ``negotiate_locale`` and pass it
explicitly; nothing here holds per-request state.
"""

from app.config import get_settings

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "username_null": "Username cannot be null",
        "username_size": "Must have min 4 and max 32 characters",
        "email_null": "E-mail cannot be null",
        "email_invalid": "E-mail is not valid",
        "email_inuse": "E-mail in use",
        "email_not_inuse": "E-mail is not in use",
        "password_null": "Password cannot be null",
        "password_size": "Password must be at least 8 characters",
        "password_too_long": "Password cannot be longer than 72 bytes",
        "password_pattern": "Password must have at least 1 uppercase, 1 lowercase letter and 1 number",
        "profile_image_size": "Your profile image cannot be bigger than 2MB",
        "profile_image_invalid": "Profile image must be a base64 encoded file",
        "field_invalid": "Invalid value",
        "validation_failure": "Validation Failure",
        "user_create_success": "User created",
        "email_failure": "E-mail Failure",
        "account_activation_failure": "This account is either active or the token is invalid",
        "account_activation_success": "Account is activated",
        "user_not_found": "User not found",
        "authentication_failure": "Incorrect credentials",
        "inactive_authentication_failure": "Account is inactive",
        "unauthorized_user_update": "You are not authorized to update user",
        "unauthorized_password_reset": (
            "You are not authorized to update your password. Please follow the password reset steps again."
        ),
        "password_reset_request_success": "Check your e-mail for resetting your password",
        "password_update_success": "Password updated",
        "logout_success": "Logged out",
        "rate_limit_exceeded": "Too many requests. Please try again later.",
        "resource_not_found": "Resource not found",
        "internal_error": "Internal server error",
        "activation_email_subject": "Account Activation",
        "activation_email_intro": "Please click the link below to activate your account",
        "activation_email_action": "Activate",
        "password_reset_email_subject": "Password Reset",
        "password_reset_email_intro": "Please click the link below to reset your password",
        "password_reset_email_action": "Reset",
    },
    "vi": {
        "username_null": "Tên người dùng không được để trống",
        "username_size": "Phải có tối thiểu 4 và tối đa 32 ký tự",
        "email_null": "E-mail không được để trống",
        "email_invalid": "E-mail không hợp lệ",
        "email_inuse": "E-mail đã được sử dụng",
        "email_not_inuse": "E-mail chưa được đăng ký",
        "password_null": "Mật khẩu không được để trống",
        "password_size": "Mật khẩu phải có ít nhất 8 ký tự",
        "password_too_long": "Mật khẩu không được dài quá 72 byte",
        "password_pattern": "Mật khẩu phải có ít nhất 1 chữ hoa, 1 chữ thường và 1 chữ số",
        "profile_image_size": "Ảnh đại diện không được lớn hơn 2MB",
        "profile_image_invalid": "Ảnh đại diện phải là tệp được mã hóa base64",
        "field_invalid": "Giá trị không hợp lệ",
        "validation_failure": "Dữ liệu không hợp lệ",
        "user_create_success": "Đã tạo người dùng",
        "email_failure": "Gửi e-mail thất bại",
        "account_activation_failure": "Tài khoản này đã được kích hoạt hoặc mã kích hoạt không hợp lệ",
        "account_activation_success": "Tài khoản đã được kích hoạt",
        "user_not_found": "Không tìm thấy người dùng",
        "authentication_failure": "Thông tin đăng nhập không chính xác",
        "inactive_authentication_failure": "Tài khoản chưa được kích hoạt",
        "unauthorized_user_update": "Bạn không có quyền cập nhật người dùng này",
        "unauthorized_password_reset": (
            "Bạn không có quyền cập nhật mật khẩu. Vui lòng thực hiện lại các bước đặt lại mật khẩu."
        ),
        "password_reset_request_success": "Vui lòng kiểm tra e-mail để đặt lại mật khẩu",
        "password_update_success": "Đã cập nhật mật khẩu",
        "logout_success": "Đã đăng xuất",
        "rate_limit_exceeded": "Quá nhiều yêu cầu. Vui lòng thử lại sau.",
        "resource_not_found": "Không tìm thấy tài nguyên",
        "internal_error": "Lỗi máy chủ",
        "activation_email_subject": "Kích hoạt tài khoản",
        "activation_email_intro": "Vui lòng nhấn vào liên kết bên dưới để kích hoạt tài khoản",
        "activation_email_action": "Kích hoạt",
        "password_reset_email_subject": "Đặt lại mật khẩu",
        "password_reset_email_intro": "Vui lòng nhấn vào liên kết bên dưới để đặt lại mật khẩu",
        "password_reset_email_action": "Đặt lại",
    },
}

SUPPORTED_LOCALES = frozenset(MESSAGES)
FALLBACK_LOCALE = "en"


def default_locale() -> str:
    locale = get_settings().DEFAULT_LOCALE
    return locale if locale in SUPPORTED_LOCALES else FALLBACK_LOCALE


def negotiate_locale(accept_language: str | None) -> str:
    """Pick the best supported locale from an Accept-Language header value.

    Tags are ranked by their ``q`` weight (default 1.0) and matched on the
    primary subtag, so ``vi-VN`` selects ``vi``. Anything unsupported falls
    back to the configured default.
    """
    if not accept_language:
        return default_locale()

    candidates: list[tuple[float, int, str]] = []
    for position, part in enumerate(accept_language.split(",")):
        tag, _, params = part.strip().partition(";")
        if not tag:
            continue
        weight = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                weight = float(params[2:])
            except ValueError:
                weight = 0.0
        candidates.append((-weight, position, tag.split("-")[0].lower()))

    for neg_weight, _, primary in sorted(candidates):
        if neg_weight < 0 and primary in SUPPORTED_LOCALES:
            return primary
    return default_locale()


def translate(locale: str, key: str) -> str:
    """Return the message for ``key`` in ``locale``; unknown keys come back unchanged."""
    catalog = MESSAGES.get(locale, MESSAGES[FALLBACK_LOCALE])
    if key in catalog:
        return catalog[key]
    return MESSAGES[FALLBACK_LOCALE].get(key, key)


def translate_errors(locale: str, errors: dict[str, str]) -> dict[str, str]:
    """Render a field -> message key mapping into field -> text."""
    return {field: translate(locale, key) for field, key in errors.items()}
