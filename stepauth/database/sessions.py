"""Record store operations for the sessions table."""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from stepauth.auth.models import UserSession
from stepauth.auth.records import SessionRecord
from stepauth.core.clock import utcnow


def create(db: Session, user_id: int, token: str, expires_at: datetime) -> SessionRecord:
    now = utcnow()
    row = UserSession(user_id=user_id, token=token, created=now, expires=expires_at, last_used=now)
    db.add(row)
    db.flush()
    db.refresh(row)
    return SessionRecord.from_row(row)


def get_by_id(db: Session, session_id: int) -> Optional[SessionRecord]:
    row = db.query(UserSession).filter(UserSession.id == session_id).populate_existing().first()
    return SessionRecord.from_row(row) if row else None


def get_by_user_id_and_token(db: Session, user_id: int, token: str) -> Optional[SessionRecord]:
    row = (
        db.query(UserSession)
        .filter(UserSession.user_id == user_id, UserSession.token == token)
        .populate_existing()
        .first()
    )
    return SessionRecord.from_row(row) if row else None


def update_last_used(db: Session, session_id: int) -> bool:
    count = (
        db.query(UserSession)
        .filter(UserSession.id == session_id)
        .update({"last_used": utcnow()}, synchronize_session="fetch")
    )
    db.flush()
    return count > 0


def delete_by_id(db: Session, session_id: int) -> bool:
    count = db.query(UserSession).filter(UserSession.id == session_id).delete(synchronize_session="fetch")
    db.flush()
    return count > 0


def delete_by_user_id(db: Session, user_id: int) -> int:
    count = db.query(UserSession).filter(UserSession.user_id == user_id).delete(synchronize_session="fetch")
    db.flush()
    return count


def delete_expired(db: Session) -> int:
    count = db.query(UserSession).filter(UserSession.expires < utcnow()).delete(synchronize_session="fetch")
    db.flush()
    return count
