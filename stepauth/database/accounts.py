"""Record store operations for the accounts table."""
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from stepauth.auth.models import Account as AccountModel
from stepauth.auth.records import AccountRecord, join_codes


def get_by_id(db: Session, account_id: int) -> Optional[AccountRecord]:
    row = db.query(AccountModel).filter(AccountModel.id == account_id).populate_existing().first()
    return AccountRecord.from_row(row) if row else None


def get_by_user_id(db: Session, user_id: int) -> Optional[AccountRecord]:
    row = db.query(AccountModel).filter(AccountModel.user_id == user_id).first()
    return AccountRecord.from_row(row) if row else None


def create(
    db: Session,
    user_id: int,
    password_hash: bytes,
    otp_secret: Optional[str],
    recovery_codes_csv: str,
) -> AccountRecord:
    row = AccountModel(
        user_id=user_id,
        password=password_hash,
        otp_secret=otp_secret,
        recovery_codes=recovery_codes_csv,
    )
    db.add(row)
    db.flush()
    db.refresh(row)
    return AccountRecord.from_row(row)


def _update(db: Session, account_id: int, **values) -> bool:
    count = db.query(AccountModel).filter(AccountModel.id == account_id).update(values, synchronize_session="fetch")
    db.flush()
    return count > 0


def update_password(db: Session, account_id: int, password_hash: bytes) -> bool:
    return _update(db, account_id, password=password_hash)


def update_otp_secret(db: Session, account_id: int, otp_secret: Optional[str]) -> bool:
    return _update(db, account_id, otp_secret=otp_secret)


def update_recovery_codes(db: Session, account_id: int, codes: Sequence[str]) -> bool:
    return _update(db, account_id, recovery_codes=join_codes(codes))


def replace_recovery_codes(db: Session, account_id: int, expected_csv: str, new_csv: str) -> bool:
    """Swap the stored code list only if it still equals ``expected_csv``.

    Returns False when another writer changed the list first.
    """
    count = (
        db.query(AccountModel)
        .filter(AccountModel.id == account_id, AccountModel.recovery_codes == expected_csv)
        .update({"recovery_codes": new_csv}, synchronize_session="fetch")
    )
    db.flush()
    return count == 1


def delete(db: Session, account_id: int) -> bool:
    count = db.query(AccountModel).filter(AccountModel.id == account_id).delete(synchronize_session="fetch")
    db.flush()
    return count > 0
