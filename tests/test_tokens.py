from datetime import timedelta

import pytest

from stepauth.auth.errors import InvalidToken
from stepauth.auth.tokens import TokenCodec, TokenKind, TokenSettings


@pytest.fixture
def codec():
    return TokenCodec(
        {
            TokenKind.ACCESS: TokenSettings("access-secret", "test-access", timedelta(minutes=15)),
            TokenKind.REFRESH: TokenSettings("refresh-secret", "test-refresh", timedelta(days=30)),
            TokenKind.LOGIN: TokenSettings("login-secret", "test-login", timedelta(minutes=5)),
        }
    )


@pytest.mark.parametrize("kind", list(TokenKind))
def test_round_trip(codec, kind):
    payload = {"user_id": 42, "session_token": "abc", "verification_types": ["password"]}
    assert codec.verify(codec.sign(kind, payload), kind) == payload


@pytest.mark.parametrize(
    "signed, verified",
    [
        (TokenKind.ACCESS, TokenKind.REFRESH),
        (TokenKind.REFRESH, TokenKind.ACCESS),
        (TokenKind.LOGIN, TokenKind.ACCESS),
        (TokenKind.ACCESS, TokenKind.LOGIN),
    ],
)
def test_kind_mismatch_is_rejected(codec, signed, verified):
    token = codec.sign(signed, {"user_id": 1})
    with pytest.raises(InvalidToken):
        codec.verify(token, verified)


def test_shared_secret_still_needs_matching_issuer_and_type():
    shared = TokenCodec(
        {
            TokenKind.ACCESS: TokenSettings("same", "same-issuer", timedelta(minutes=5)),
            TokenKind.REFRESH: TokenSettings("same", "same-issuer", timedelta(minutes=5)),
            TokenKind.LOGIN: TokenSettings("same", "login-issuer", timedelta(minutes=5)),
        }
    )
    with pytest.raises(InvalidToken):
        shared.verify(shared.sign(TokenKind.ACCESS, {"user_id": 1}), TokenKind.REFRESH)
    with pytest.raises(InvalidToken):
        shared.verify(shared.sign(TokenKind.ACCESS, {"user_id": 1}), TokenKind.LOGIN)


def test_expired_token_is_rejected(codec):
    token = codec.sign(TokenKind.ACCESS, {"user_id": 1}, expires_in=timedelta(seconds=-10))
    with pytest.raises(InvalidToken):
        codec.verify(token, TokenKind.ACCESS)


def test_tampered_token_is_rejected(codec):
    token = codec.sign(TokenKind.ACCESS, {"user_id": 1})
    head, body, sig = token.split(".")
    forged = ".".join([head, body, sig[:-2] + ("AA" if sig[-2:] != "AA" else "BB")])
    with pytest.raises(InvalidToken):
        codec.verify(forged, TokenKind.ACCESS)
    with pytest.raises(InvalidToken):
        codec.verify("not-a-token", TokenKind.ACCESS)


def test_payload_cannot_override_reserved_claims(codec):
    token = codec.sign(TokenKind.ACCESS, {"user_id": 1, "type": "login", "iss": "evil"})
    assert codec.verify(token, TokenKind.ACCESS) == {"user_id": 1}


def test_all_kinds_need_settings():
    with pytest.raises(ValueError):
        TokenCodec({TokenKind.ACCESS: TokenSettings("s", "i", timedelta(minutes=1))})


def test_unencodable_token_is_rejected(codec):
    with pytest.raises(InvalidToken):
        codec.verify("\ud800", TokenKind.LOGIN)
