"""Session lifecycle and the access/refresh tokens bound to a session.

Both tokens of a session embed the session's secret token. Resolving either one
looks the session up again, so deleting the session revokes both even though
the tokens themselves stay cryptographically valid until they expire.
"""
import logging
import secrets
import string
from typing import Optional

from sqlalchemy.orm import Session

from stepauth.auth import tokens
from stepauth.auth.errors import AuthError, NotFound
from stepauth.auth.records import SessionRecord
from stepauth.auth.tokens import TokenCodec, TokenKind
from stepauth.core.clock import utcnow
from stepauth.core.config import SESSION_EXPIRATION, SESSION_TOKEN_LENGTH
from stepauth.database import sessions as session_store

logger = logging.getLogger(__name__)

SESSION_TOKEN_ALPHABET = string.ascii_letters + string.digits


def create_session_token(length: int = SESSION_TOKEN_LENGTH) -> str:
    return "".join(secrets.choice(SESSION_TOKEN_ALPHABET) for _ in range(length))


def create_session(db: Session, user_id: int, commit: bool = True) -> SessionRecord:
    session = session_store.create(db, user_id, create_session_token(), utcnow() + SESSION_EXPIRATION)
    if commit:
        db.commit()
    logger.info("Session %s created for user %s", session.id, user_id)
    return session


def by_id(db: Session, session_id: int) -> Optional[SessionRecord]:
    return session_store.get_by_id(db, session_id)


def by_user_id_and_token(db: Session, user_id: int, token: str) -> Optional[SessionRecord]:
    return session_store.get_by_user_id_and_token(db, user_id, token)


def refresh_session(db: Session, session: SessionRecord) -> SessionRecord:
    fresh = by_id(db, session.id)
    if fresh is None:
        raise NotFound("Session not found")
    return fresh


def _token_payload(session: SessionRecord) -> dict:
    return {"user_id": session.user_id, "session_token": session.token}


def access_token(session: SessionRecord, codec: Optional[TokenCodec] = None) -> str:
    return (codec or tokens.codec).sign(TokenKind.ACCESS, _token_payload(session))


def refresh_token(session: SessionRecord, codec: Optional[TokenCodec] = None) -> str:
    return (codec or tokens.codec).sign(TokenKind.REFRESH, _token_payload(session))


def _by_bearer(db: Session, token: str, kind: TokenKind, codec: Optional[TokenCodec]) -> Optional[SessionRecord]:
    try:
        payload = (codec or tokens.codec).verify(token, kind)
    except AuthError:
        return None
    user_id = payload.get("user_id")
    secret = payload.get("session_token")
    if not isinstance(user_id, int) or not isinstance(secret, str):
        return None
    session = by_user_id_and_token(db, user_id, secret)
    if session is None or session.expired:
        return None
    return session


def by_access_token(db: Session, token: str, codec: Optional[TokenCodec] = None) -> Optional[SessionRecord]:
    return _by_bearer(db, token, TokenKind.ACCESS, codec)


def by_refresh_token(db: Session, token: str, codec: Optional[TokenCodec] = None) -> Optional[SessionRecord]:
    return _by_bearer(db, token, TokenKind.REFRESH, codec)


def update_last_used(db: Session, session: SessionRecord) -> None:
    session_store.update_last_used(db, session.id)
    db.commit()


def delete_session(db: Session, session: SessionRecord) -> None:
    session_store.delete_by_id(db, session.id)
    db.commit()
    logger.info("Session %s deleted", session.id)


def delete_all_for_user(db: Session, user_id: int, commit: bool = True) -> int:
    count = session_store.delete_by_user_id(db, user_id)
    if commit:
        db.commit()
    logger.info("Deleted %d sessions for user %s", count, user_id)
    return count


def delete_expired(db: Session) -> int:
    count = session_store.delete_expired(db)
    db.commit()
    if count:
        logger.info("Swept %d expired sessions", count)
    return count
