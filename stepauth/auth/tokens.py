"""Signing and verification of access, refresh and login bearer tokens.

Every kind has its own secret, issuer and lifetime. A token only verifies under
the kind it was signed for: the secret, the ``iss`` claim and the ``type`` claim
all have to match.
"""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import jwt

from stepauth.auth.errors import InvalidToken
from stepauth.core import config
from stepauth.core.clock import utcnow


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    LOGIN = "login"


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    issuer: str
    expiration: timedelta


# Claims added by the codec itself; callers never supply them
_RESERVED = ("type", "iss", "exp", "iat")


class TokenCodec:
    def __init__(self, settings: Mapping[TokenKind, TokenSettings], algorithm: str = config.JWT_ALG):
        missing = [k.value for k in TokenKind if k not in settings]
        if missing:
            raise ValueError(f"Missing token settings for: {', '.join(missing)}")
        self._settings = dict(settings)
        self._algorithm = algorithm

    def sign(self, kind: TokenKind, payload: Mapping[str, Any], expires_in: Optional[timedelta] = None) -> str:
        kind = TokenKind(kind)
        settings = self._settings[kind]
        now = utcnow()
        claims = {k: v for k, v in payload.items() if k not in _RESERVED}
        claims.update(
            {
                "type": kind.value,
                "iss": settings.issuer,
                "iat": now,
                "exp": now + (settings.expiration if expires_in is None else expires_in),
            }
        )
        return jwt.encode(claims, settings.secret, algorithm=self._algorithm)

    def verify(self, token: str, kind: TokenKind) -> Dict[str, Any]:
        kind = TokenKind(kind)
        settings = self._settings[kind]
        try:
            payload = jwt.decode(
                token,
                settings.secret,
                algorithms=[self._algorithm],
                issuer=settings.issuer,
                options={"require": ["exp", "iss", "type"]},
            )
        except (jwt.PyJWTError, UnicodeEncodeError) as exc:
            raise InvalidToken() from exc
        if payload.get("type") != kind.value:
            raise InvalidToken()
        return {k: v for k, v in payload.items() if k not in _RESERVED}


def default_settings() -> Dict[TokenKind, TokenSettings]:
    return {
        TokenKind.ACCESS: TokenSettings(config.ACCESS_SECRET, config.ACCESS_ISSUER, config.ACCESS_EXPIRATION),
        TokenKind.REFRESH: TokenSettings(config.REFRESH_SECRET, config.REFRESH_ISSUER, config.REFRESH_EXPIRATION),
        TokenKind.LOGIN: TokenSettings(config.LOGIN_SECRET, config.LOGIN_ISSUER, config.LOGIN_EXPIRATION),
    }


codec = TokenCodec(default_settings())
