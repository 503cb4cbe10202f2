from enum import Enum


class Role(str, Enum):
    SYSTEM = "system"
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    UNVERIFIED = "unverified"

    @property
    def id(self) -> int:
        return ROLE_IDS[self]

    @property
    def level(self) -> int:
        return ROLE_LEVELS[self]

    @classmethod
    def from_id(cls, role_id: int) -> "Role":
        for role, rid in ROLE_IDS.items():
            if rid == role_id:
                return role
        raise ValueError(f"Unknown role id: {role_id}")


# Persisted ids, do not renumber
ROLE_IDS = {
    Role.SYSTEM: 0,
    Role.ADMIN: 1,
    Role.MODERATOR: 2,
    Role.USER: 3,
    Role.UNVERIFIED: 4,
}

ROLE_LEVELS = {
    Role.SYSTEM: 100,
    Role.ADMIN: 50,
    Role.MODERATOR: 20,
    Role.USER: 10,
    Role.UNVERIFIED: 0,
}
