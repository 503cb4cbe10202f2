"""Typed rejections raised by the authentication core.

Each error carries a machine readable ``type``, a short ``message`` and the
HTTP status the API layer answers with.
"""
from typing import Optional


class AuthError(Exception):
    type = "internal_error"
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message}


class InvalidRequest(AuthError):
    type = "invalid_request"
    status_code = 400
    default_message = "Invalid request"


class InvalidToken(AuthError):
    type = "invalid_token"
    status_code = 401
    default_message = "Invalid token"


class NotFound(AuthError):
    type = "not_found"
    status_code = 404
    default_message = "Not found"


class Forbidden(AuthError):
    type = "forbidden"
    status_code = 403
    default_message = "Forbidden"


class UserDeleted(Forbidden):
    type = "deleted"
    default_message = "User is deleted"


class AlreadyUsed(AuthError):
    type = "already_used"
    status_code = 400
    default_message = "Already in use"


class InvalidPassword(AuthError):
    type = "invalid_password"
    status_code = 401
    default_message = "Invalid password"


class InvalidTotp(AuthError):
    type = "invalid_totp"
    status_code = 401
    default_message = "Invalid TOTP token"


class InvalidBackupCode(AuthError):
    type = "invalid_backup_code"
    status_code = 401
    default_message = "Invalid backup code"


class TotpNotEnabled(AuthError):
    type = "totp_not_enabled"
    status_code = 400
    default_message = "TOTP is not enabled"


class TotpAlreadyEnabled(AuthError):
    type = "totp_already_enabled"
    status_code = 400
    default_message = "TOTP already enabled"


class TotpNotPending(AuthError):
    type = "totp_not_found"
    status_code = 400
    default_message = "TOTP not generated or expired"


class VerificationTypeBlocked(AuthError):
    type = "verification_type_blocked"
    status_code = 400
    default_message = "Verification type is blocked by previous verification type"


class NotSupported(AuthError):
    type = "not_supported"
    status_code = 400
    default_message = "Not supported"


class InternalError(AuthError):
    pass
