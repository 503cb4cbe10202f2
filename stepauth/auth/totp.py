import base64
import hashlib
import io

import pyotp
import qrcode

from stepauth.core.config import (
    TOTP_ALGORITHM,
    TOTP_DIGITS,
    TOTP_ISSUER,
    TOTP_LABEL,
    TOTP_PERIOD,
    TOTP_SECRET_LENGTH,
    TOTP_VALIDATION_WINDOW,
)
from stepauth.core.text import is_utf8

_digest = getattr(hashlib, TOTP_ALGORITHM.lower().replace("-", ""))


def generate_secret(length: int = TOTP_SECRET_LENGTH) -> str:
    return pyotp.random_base32(length=length)


def make_totp(secret: str) -> pyotp.TOTP:
    return pyotp.TOTP(
        secret,
        digits=TOTP_DIGITS,
        digest=_digest,
        name=TOTP_LABEL,
        issuer=TOTP_ISSUER,
        interval=TOTP_PERIOD,
    )


def verify(totp: pyotp.TOTP, code: str, valid_window: int = TOTP_VALIDATION_WINDOW) -> bool:
    if not is_utf8(code):
        return False
    # Accepts the current step and `valid_window` steps on either side
    return totp.verify(code.strip(), valid_window=valid_window)


def current_code(totp: pyotp.TOTP) -> str:
    return totp.now()


def provisioning_uri(totp: pyotp.TOTP) -> str:
    return totp.provisioning_uri()


def qr_data_url(uri: str) -> str:
    buf = io.BytesIO()
    qrcode.make(uri).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode()
