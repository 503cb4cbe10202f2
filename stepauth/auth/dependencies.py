from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from stepauth.auth import sessions
from stepauth.auth.errors import InvalidToken
from stepauth.auth.records import SessionRecord
from stepauth.database.database import get_db

bearer_scheme = HTTPBearer(auto_error=False)


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise InvalidToken("Not authenticated")
    return credentials.credentials


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> SessionRecord:
    """Resolve the session behind an access token and mark it as used."""
    session = sessions.by_access_token(db, _bearer_token(credentials))
    if session is None:
        raise InvalidToken()
    sessions.update_last_used(db, session)
    return session


def get_refresh_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> SessionRecord:
    session = sessions.by_refresh_token(db, _bearer_token(credentials))
    if session is None:
        raise InvalidToken()
    return session
