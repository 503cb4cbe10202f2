"""Turning TOTP on and off for an account.

Enabling is a three step handshake: generate a secret (kept in the pending
table), verify a code from it together with the password, then commit the
secret to the account. Cancel drops the pending secret.
"""
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from stepauth.auth import credentials, totp
from stepauth.auth.errors import (
    InvalidBackupCode,
    InvalidPassword,
    InvalidRequest,
    InvalidTotp,
    TotpAlreadyEnabled,
    TotpNotEnabled,
    TotpNotPending,
)
from stepauth.auth.pending_totp import PendingTotpSecrets, pending_totp
from stepauth.auth.verification import VerificationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TotpEnrollment:
    secret: str
    uri: str
    qr: str


def begin(db: Session, user_id: int, pending: PendingTotpSecrets = pending_totp) -> TotpEnrollment:
    account = credentials.get_account_for_user(db, user_id)
    if account.totp_enabled:
        raise TotpAlreadyEnabled()
    secret = totp.generate_secret()
    uri = totp.provisioning_uri(totp.make_totp(secret))
    pending.put(user_id, secret)
    logger.info("TOTP enrollment started for user %s", user_id)
    return TotpEnrollment(secret=secret, uri=uri, qr=totp.qr_data_url(uri))


def confirm(
    db: Session,
    user_id: int,
    code: str,
    password: str,
    pending: PendingTotpSecrets = pending_totp,
) -> None:
    account = credentials.get_account_for_user(db, user_id)
    if account.totp_enabled:
        raise TotpAlreadyEnabled()
    secret = pending.get(user_id)
    if secret is None:
        raise TotpNotPending()
    if not totp.verify(totp.make_totp(secret), code):
        raise InvalidTotp()
    if not credentials.verify_password(account, password):
        raise InvalidPassword()
    credentials.set_otp_secret(db, account, secret)
    pending.discard(user_id)


def cancel(db: Session, user_id: int, pending: PendingTotpSecrets = pending_totp) -> None:
    account = credentials.get_account_for_user(db, user_id)
    if account.totp_enabled:
        raise TotpAlreadyEnabled()
    pending.discard(user_id)


def disable(db: Session, user_id: int, validation_type: VerificationType, token: str) -> None:
    """Remove the TOTP secret after proving possession of it or of a recovery code.

    A recovery code used here is consumed.
    """
    account = credentials.get_account_for_user(db, user_id)
    if not account.totp_enabled:
        raise TotpNotEnabled()
    if validation_type == VerificationType.TOTP:
        if not totp.verify(totp.make_totp(account.otp_secret), token):
            raise InvalidTotp()
    elif validation_type == VerificationType.BACKUP_CODE:
        if not credentials.use_recovery_code(db, account, token, consume=True, commit=False):
            raise InvalidBackupCode()
    else:
        raise InvalidRequest("Validation type must be totp or backup_code")
    credentials.set_otp_secret(db, account, None)


def is_enabled(db: Session, user_id: int) -> bool:
    return credentials.get_account_for_user(db, user_id).totp_enabled
