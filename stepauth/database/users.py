"""Record store operations for the users table.

Writes are flushed, not committed; the calling service owns the transaction.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from stepauth.auth.models import User as UserModel
from stepauth.auth.records import UserRecord
from stepauth.auth.roles import Role
from stepauth.core.clock import utcnow


def _row(db: Session, user_id: int) -> Optional[UserModel]:
    return db.query(UserModel).filter(UserModel.id == user_id).populate_existing().first()


def get_by_id(db: Session, user_id: int) -> Optional[UserRecord]:
    row = _row(db, user_id)
    return UserRecord.from_row(row) if row else None


def get_by_username(db: Session, username: str) -> Optional[UserRecord]:
    row = db.query(UserModel).filter(UserModel.username == username).first()
    return UserRecord.from_row(row) if row else None


def get_by_email(db: Session, email: str) -> Optional[UserRecord]:
    row = db.query(UserModel).filter(UserModel.email == email).first()
    return UserRecord.from_row(row) if row else None


def list_all(db: Session) -> List[UserRecord]:
    return [UserRecord.from_row(r) for r in db.query(UserModel).order_by(UserModel.id).all()]


def create(db: Session, username: str, email: str, display_name: str, role: Role = Role.UNVERIFIED) -> UserRecord:
    row = UserModel(username=username, email=email, display_name=display_name, role=role.id)
    db.add(row)
    db.flush()
    db.refresh(row)
    return UserRecord.from_row(row)


def _update(db: Session, user_id: int, **values) -> bool:
    count = db.query(UserModel).filter(UserModel.id == user_id).update(values, synchronize_session="fetch")
    db.flush()
    return count > 0


def update_display_name(db: Session, user_id: int, display_name: str) -> bool:
    return _update(db, user_id, display_name=display_name)


def update_role(db: Session, user_id: int, role: Role) -> bool:
    return _update(db, user_id, role=role.id)


def update_proof_of_work(db: Session, user_id: int, proof_of_work: Optional[str]) -> bool:
    return _update(db, user_id, proof_of_work=proof_of_work)


def soft_delete(db: Session, user_id: int) -> bool:
    return _update(db, user_id, deleted_at=utcnow(), username=None, email=None)


def ban(db: Session, user_id: int) -> bool:
    return _update(db, user_id, banned_at=utcnow())


def unban(db: Session, user_id: int) -> bool:
    return _update(db, user_id, banned_at=None)
