"""Step-up login.

A login attempt is a sequence of requests. The first names the user by
username or email, later ones carry the ``login`` token handed out by the
previous step. Every request presents one credential. Once enough verification
types have succeeded a session is created; otherwise a new login token records
what was used so far and which types remain available.

Note: ``REQUIRED_VERIFICATIONS`` is 1, so any single successful factor
completes the login. Further steps only happen when a client keeps presenting
a login token on its own; enforcing a second factor is left to a policy layer
above this module.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from stepauth.auth import credentials, sessions, tokens, totp
from stepauth.auth.errors import (
    Forbidden,
    InternalError,
    InvalidBackupCode,
    InvalidPassword,
    InvalidRequest,
    InvalidToken,
    InvalidTotp,
    NotFound,
    NotSupported,
    TotpNotEnabled,
    UserDeleted,
    VerificationTypeBlocked,
)
from stepauth.auth.records import AccountRecord, UserRecord
from stepauth.auth.roles import Role
from stepauth.auth.tokens import TokenCodec, TokenKind
from stepauth.auth.users import require_storable
from stepauth.auth.verification import (
    BackupCodeCredential,
    Credential,
    EmailCredential,
    PasswordCredential,
    TotpCredential,
    VerificationType,
    available_after,
    is_blocked,
)
from stepauth.database import accounts as account_store
from stepauth.database import users as user_store

logger = logging.getLogger(__name__)

REQUIRED_VERIFICATIONS = 1


@dataclass(frozen=True)
class LoginAttempt:
    credential: Credential
    username: Optional[str] = None
    email: Optional[str] = None
    token: Optional[str] = None


@dataclass(frozen=True)
class IntermediaryResult:
    previous: Tuple[VerificationType, ...]
    next: Tuple[VerificationType, ...]
    token: str
    status = "intermediary"


@dataclass(frozen=True)
class CompleteResult:
    user: UserRecord
    access_token: str
    refresh_token: str
    session_id: int
    status = "complete"


LoginResult = Union[IntermediaryResult, CompleteResult]


def _previous_types(payload: dict) -> List[VerificationType]:
    raw = payload.get("verification_types")
    if not isinstance(raw, list):
        raise InvalidToken()
    try:
        return [VerificationType(v) for v in raw]
    except ValueError as exc:
        raise InvalidToken() from exc


def _resolve_user(db: Session, attempt: LoginAttempt, payload: Optional[dict]) -> UserRecord:
    if payload is not None:
        user_id = payload.get("user_id")
        if not isinstance(user_id, int):
            raise InvalidToken()
        user = user_store.get_by_id(db, user_id)
    elif attempt.username is not None:
        user = user_store.get_by_username(db, attempt.username)
    else:
        user = user_store.get_by_email(db, attempt.email)

    if user is None:
        raise NotFound("User not found")
    if user.deleted:
        raise UserDeleted()
    if user.role == Role.SYSTEM:
        raise Forbidden("System user cannot login")
    return user


def _verify(db: Session, account: AccountRecord, credential: Credential) -> None:
    if isinstance(credential, PasswordCredential):
        if not credentials.verify_password(account, credential.password):
            raise InvalidPassword()
    elif isinstance(credential, TotpCredential):
        if not account.otp_secret:
            raise TotpNotEnabled()
        if not totp.verify(totp.make_totp(account.otp_secret), credential.code):
            raise InvalidTotp()
    elif isinstance(credential, BackupCodeCredential):
        # Consumed inside the caller's transaction, committed with the result
        if not credentials.use_recovery_code(db, account, credential.code, consume=True, commit=False):
            raise InvalidBackupCode()
    elif isinstance(credential, EmailCredential):
        raise NotSupported("Email verification is not yet supported")
    else:
        raise InvalidRequest("Invalid verification type")


def login_step(db: Session, attempt: LoginAttempt, codec: Optional[TokenCodec] = None) -> LoginResult:
    codec = codec or tokens.codec

    selectors = [s for s in (attempt.username, attempt.email, attempt.token) if s is not None]
    if attempt.username is not None and attempt.email is not None:
        raise InvalidRequest("Username and email cannot be used at the same time")
    if len(selectors) != 1:
        raise InvalidRequest("Exactly one of username, email or token is required")
    require_storable(attempt.username, "username")
    require_storable(attempt.email, "email")

    payload = None
    previous: List[VerificationType] = []
    if attempt.token is not None:
        payload = codec.verify(attempt.token, TokenKind.LOGIN)
        previous = _previous_types(payload)

    user = _resolve_user(db, attempt, payload)

    account = account_store.get_by_user_id(db, user.id)
    if account is None:
        logger.error("User %s has no account", user.id)
        raise InternalError("Could not find account")

    current = attempt.credential.verification_type
    if is_blocked(previous, current):
        raise VerificationTypeBlocked()

    try:
        _verify(db, account, attempt.credential)
    except Exception:
        db.rollback()
        logger.info("Login step for user %s rejected (%s)", user.id, current.value)
        raise

    used = previous + [current]
    if len(used) >= REQUIRED_VERIFICATIONS:
        session = sessions.create_session(db, user.id, commit=False)
        db.commit()
        logger.info("Login complete for user %s via %s", user.id, ", ".join(v.value for v in used))
        return CompleteResult(
            user=user,
            access_token=sessions.access_token(session, codec),
            refresh_token=sessions.refresh_token(session, codec),
            session_id=session.id,
        )

    db.commit()
    token = codec.sign(TokenKind.LOGIN, {"user_id": user.id, "verification_types": [v.value for v in used]})
    return IntermediaryResult(previous=tuple(used), next=tuple(available_after(used)), token=token)
