"""Password, TOTP secret and recovery code handling for an account."""
import hashlib
import hmac
import logging
import secrets
import string
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from stepauth.auth.errors import NotFound
from stepauth.auth.records import AccountRecord, join_codes
from stepauth.core.config import HASH_ALGORITHM, RECOVERY_CODE_COUNT, RECOVERY_CODE_LENGTH
from stepauth.database import accounts as account_store

logger = logging.getLogger(__name__)

RECOVERY_CODE_ALPHABET = string.ascii_lowercase + string.digits

# Attempts at swapping the code list before giving up on a contended account
_CONSUME_ATTEMPTS = 3


def hash_password(password: str) -> bytes:
    return hashlib.new(HASH_ALGORITHM, password.encode("utf-8", "surrogatepass")).digest()


def verify_password(account: AccountRecord, candidate: str) -> bool:
    return hmac.compare_digest(account.password, hash_password(candidate))


def create_recovery_codes(amount: int = RECOVERY_CODE_COUNT, length: int = RECOVERY_CODE_LENGTH) -> List[str]:
    return ["".join(secrets.choice(RECOVERY_CODE_ALPHABET) for _ in range(length)) for _ in range(amount)]


def get_account(db: Session, account_id: int) -> AccountRecord:
    account = account_store.get_by_id(db, account_id)
    if account is None:
        raise NotFound("Account not found")
    return account


def get_account_for_user(db: Session, user_id: int) -> AccountRecord:
    account = account_store.get_by_user_id(db, user_id)
    if account is None:
        raise NotFound("Account not found")
    return account


def refresh_account(db: Session, account: AccountRecord) -> AccountRecord:
    return get_account(db, account.id)


def create_account(db: Session, user_id: int, password: str, commit: bool = True) -> AccountRecord:
    account = account_store.create(
        db,
        user_id=user_id,
        password_hash=hash_password(password),
        otp_secret=None,
        recovery_codes_csv=join_codes(create_recovery_codes()),
    )
    if commit:
        db.commit()
    return account


def set_password(db: Session, account: AccountRecord, new_password: str) -> None:
    if not account_store.update_password(db, account.id, hash_password(new_password)):
        raise NotFound("Account not found")
    db.commit()
    logger.info("Password changed for account %s", account.id)


def set_otp_secret(db: Session, account: AccountRecord, secret: Optional[str]) -> None:
    if not account_store.update_otp_secret(db, account.id, secret):
        raise NotFound("Account not found")
    db.commit()
    logger.info("TOTP %s for account %s", "enabled" if secret else "disabled", account.id)


def set_recovery_codes(db: Session, account: AccountRecord, codes: Sequence[str]) -> None:
    if not account_store.update_recovery_codes(db, account.id, codes):
        raise NotFound("Account not found")
    db.commit()


def use_recovery_code(
    db: Session,
    account: AccountRecord,
    code: str,
    consume: bool = False,
    commit: bool = True,
) -> bool:
    """Check ``code`` against the account's current recovery codes.

    With ``consume`` the matching code is removed through a compare-and-swap on
    the stored list, so two concurrent uses of one code cannot both succeed.
    """
    current = get_account(db, account.id)
    if not consume:
        return code in current.recovery_codes

    for _ in range(_CONSUME_ATTEMPTS):
        if code not in current.recovery_codes:
            return False
        remaining = list(current.recovery_codes)
        remaining.remove(code)
        swapped = account_store.replace_recovery_codes(
            db, account.id, join_codes(current.recovery_codes), join_codes(remaining)
        )
        if swapped:
            if commit:
                db.commit()
            logger.info("Recovery code used for account %s, %d left", account.id, len(remaining))
            return True
        current = get_account(db, account.id)
    logger.warning("Could not consume recovery code for account %s: list kept changing", account.id)
    return False
