"""User lifecycle: registration, soft deletion, roles and the proof-of-work claim."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stepauth.auth import credentials, proof_of_work, sessions
from stepauth.auth.errors import AlreadyUsed, Forbidden, InvalidRequest, NotFound
from stepauth.auth.records import AccountRecord, SessionRecord, UserRecord
from stepauth.auth.roles import Role
from stepauth.core.text import is_utf8
from stepauth.database import accounts as account_store
from stepauth.database import users as user_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Registration:
    user: UserRecord
    account: AccountRecord
    session: SessionRecord


def require_storable(value: Optional[str], field: str) -> None:
    if value is not None and not is_utf8(value):
        raise InvalidRequest(f"{field} is not valid text")


def is_username_taken(db: Session, username: str) -> bool:
    return user_store.get_by_username(db, username) is not None


def is_email_taken(db: Session, email: str) -> bool:
    return user_store.get_by_email(db, email) is not None


def get_user(db: Session, user_id: int) -> UserRecord:
    user = user_store.get_by_id(db, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def refresh_user(db: Session, user: UserRecord) -> UserRecord:
    return get_user(db, user.id)


def list_users(db: Session) -> List[UserRecord]:
    return user_store.list_all(db)


def register_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    display_name: Optional[str] = None,
    role: Role = Role.UNVERIFIED,
) -> Registration:
    """Create a user, its account and a first session in one transaction."""
    require_storable(username, "username")
    require_storable(email, "email")
    require_storable(display_name, "display_name")
    if is_username_taken(db, username):
        raise AlreadyUsed("Username is already taken")
    if is_email_taken(db, email):
        raise AlreadyUsed("Email is already taken")

    try:
        user = user_store.create(db, username, email, display_name or username, role)
    except IntegrityError as exc:
        # Lost a race against a concurrent registration
        db.rollback()
        raise AlreadyUsed("Username or email is already taken") from exc
    account = credentials.create_account(db, user.id, password, commit=False)
    session = sessions.create_session(db, user.id, commit=False)
    db.commit()
    logger.info("Registered user %s", user.id)
    return Registration(user=user, account=account, session=session)


def delete_user(db: Session, user: UserRecord) -> UserRecord:
    """Soft delete: null the PII fields, drop the account and every session."""
    if not user_store.soft_delete(db, user.id):
        raise NotFound("User not found")
    account = account_store.get_by_user_id(db, user.id)
    if account is not None:
        account_store.delete(db, account.id)
    sessions.delete_all_for_user(db, user.id, commit=False)
    db.commit()
    logger.info("Deleted user %s", user.id)
    return get_user(db, user.id)


def ban_user(db: Session, user: UserRecord) -> UserRecord:
    user_store.ban(db, user.id)
    db.commit()
    logger.info("Banned user %s", user.id)
    return get_user(db, user.id)


def unban_user(db: Session, user: UserRecord) -> UserRecord:
    user_store.unban(db, user.id)
    db.commit()
    logger.info("Unbanned user %s", user.id)
    return get_user(db, user.id)


def set_role(db: Session, user: UserRecord, role: Role) -> UserRecord:
    user_store.update_role(db, user.id, role)
    db.commit()
    logger.info("User %s is now %s", user.id, role.value)
    return get_user(db, user.id)


def set_display_name(db: Session, user: UserRecord, display_name: str) -> UserRecord:
    require_storable(display_name, "display_name")
    user_store.update_display_name(db, user.id, display_name)
    db.commit()
    return get_user(db, user.id)


def require_self_or_admin(actor: UserRecord, target: UserRecord) -> None:
    if actor.id != target.id and actor.role.level < Role.ADMIN.level:
        raise Forbidden()


def proof_of_work_difficulty(user: UserRecord) -> int:
    if user.proof_of_work is None:
        return 0
    return proof_of_work.difficulty(user.proof_of_work)


def set_proof_of_work(
    db: Session,
    user: UserRecord,
    token: Optional[str],
    ignore_previous: bool = False,
) -> UserRecord:
    """Store a new proof-of-work token for ``user``.

    The token is refused when its difficulty is lower than the stored one,
    unless ``ignore_previous`` is set. A ``None`` token clears the claim and
    counts as difficulty 0.
    """
    require_storable(token, "proof_of_work")
    current = get_user(db, user.id)
    if not ignore_previous:
        previous = proof_of_work_difficulty(current)
        new = proof_of_work.difficulty(token) if token is not None else 0
        if new < previous:
            raise InvalidRequest("New proof of work has lower difficulty than the previous one")
    user_store.update_proof_of_work(db, user.id, token)
    db.commit()
    return get_user(db, user.id)
