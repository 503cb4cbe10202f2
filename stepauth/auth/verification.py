"""Verification types usable during login and the credentials that carry them."""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List, Mapping, Union


class VerificationType(str, Enum):
    PASSWORD = "password"
    EMAIL = "email"
    TOTP = "totp"
    BACKUP_CODE = "backup_code"


# Types that can no longer be used once the key type was used in the same attempt
BLOCKS: Mapping[VerificationType, FrozenSet[VerificationType]] = {
    VerificationType.PASSWORD: frozenset({VerificationType.PASSWORD}),
    VerificationType.EMAIL: frozenset({VerificationType.EMAIL}),
    VerificationType.TOTP: frozenset({VerificationType.TOTP, VerificationType.BACKUP_CODE}),
    VerificationType.BACKUP_CODE: frozenset({VerificationType.BACKUP_CODE, VerificationType.TOTP}),
}


def is_blocked(previous: Iterable[VerificationType], current: VerificationType) -> bool:
    return any(current in BLOCKS[used] for used in previous)


def available_after(used: Iterable[VerificationType]) -> List[VerificationType]:
    used = list(used)
    return [vt for vt in VerificationType if not is_blocked(used, vt)]


@dataclass(frozen=True)
class PasswordCredential:
    password: str
    verification_type = VerificationType.PASSWORD


@dataclass(frozen=True)
class TotpCredential:
    code: str
    verification_type = VerificationType.TOTP


@dataclass(frozen=True)
class BackupCodeCredential:
    code: str
    verification_type = VerificationType.BACKUP_CODE


@dataclass(frozen=True)
class EmailCredential:
    code: str
    verification_type = VerificationType.EMAIL


Credential = Union[PasswordCredential, TotpCredential, BackupCodeCredential, EmailCredential]
