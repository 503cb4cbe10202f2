"""Immutable snapshots of stored users, accounts and sessions.

Snapshots are never updated in place. After a mutation, callers that still need
the entity re-read it through the matching ``refresh_*`` function.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from stepauth.auth.roles import Role
from stepauth.core.clock import utcnow


def split_codes(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(c for c in raw.split(",") if c)


def join_codes(codes) -> str:
    return ",".join(codes)


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: Optional[str]
    email: Optional[str]
    display_name: str
    created_at: datetime
    deleted_at: Optional[datetime]
    banned_at: Optional[datetime]
    role: Role
    proof_of_work: Optional[str]

    @classmethod
    def from_row(cls, row) -> "UserRecord":
        return cls(
            id=row.id,
            username=row.username,
            email=row.email,
            display_name=row.display_name,
            created_at=row.created_at,
            deleted_at=row.deleted_at,
            banned_at=row.banned_at,
            role=Role.from_id(row.role),
            proof_of_work=row.proof_of_work,
        )

    @property
    def deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def banned(self) -> bool:
        return self.banned_at is not None


@dataclass(frozen=True)
class AccountRecord:
    id: int
    user_id: int
    password: bytes
    otp_secret: Optional[str]
    recovery_codes: Tuple[str, ...]

    @classmethod
    def from_row(cls, row) -> "AccountRecord":
        return cls(
            id=row.id,
            user_id=row.user_id,
            password=bytes(row.password),
            otp_secret=row.otp_secret,
            recovery_codes=split_codes(row.recovery_codes),
        )

    @property
    def totp_enabled(self) -> bool:
        return bool(self.otp_secret)


@dataclass(frozen=True)
class SessionRecord:
    id: int
    user_id: int
    token: str
    created: datetime
    expires: datetime
    last_used: datetime

    @classmethod
    def from_row(cls, row) -> "SessionRecord":
        return cls(
            id=row.id,
            user_id=row.user_id,
            token=row.token,
            created=row.created,
            expires=row.expires,
            last_used=row.last_used,
        )

    @property
    def expired(self) -> bool:
        return self.expires < utcnow()
