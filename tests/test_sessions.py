from datetime import timedelta

from stepauth.auth import sessions
from stepauth.auth.models import UserSession
from stepauth.core.clock import utcnow
from stepauth.core.config import SESSION_EXPIRATION, SESSION_TOKEN_LENGTH


def _expire(db, session):
    db.query(UserSession).filter(UserSession.id == session.id).update({"expires": utcnow() - timedelta(minutes=1)})
    db.commit()


def test_create_session(db, alice):
    session = sessions.create_session(db, alice.user.id)
    assert session.user_id == alice.user.id
    assert len(session.token) == SESSION_TOKEN_LENGTH
    assert session.token.isalnum()
    assert session.token != alice.session.token
    assert abs((session.expires - session.created) - SESSION_EXPIRATION) < timedelta(seconds=5)
    assert not session.expired


def test_point_lookups(db, alice):
    assert sessions.by_id(db, alice.session.id) == alice.session
    assert sessions.by_user_id_and_token(db, alice.user.id, alice.session.token) == alice.session
    assert sessions.by_id(db, 12345) is None
    assert sessions.by_user_id_and_token(db, alice.user.id, "nope") is None


def test_access_and_refresh_resolve_to_same_session(db, alice):
    by_access = sessions.by_access_token(db, sessions.access_token(alice.session))
    by_refresh = sessions.by_refresh_token(db, sessions.refresh_token(alice.session))
    assert by_access.id == by_refresh.id == alice.session.id


def test_deleting_session_revokes_both_tokens(db, alice):
    access = sessions.access_token(alice.session)
    refresh = sessions.refresh_token(alice.session)
    sessions.delete_session(db, alice.session)
    assert sessions.by_access_token(db, access) is None
    assert sessions.by_refresh_token(db, refresh) is None


def test_wrong_kind_or_garbage_resolves_to_nothing(db, alice):
    assert sessions.by_refresh_token(db, sessions.access_token(alice.session)) is None
    assert sessions.by_access_token(db, sessions.refresh_token(alice.session)) is None
    assert sessions.by_access_token(db, "garbage") is None


def test_expired_session_never_resolves(db, alice):
    access = sessions.access_token(alice.session)
    _expire(db, alice.session)
    assert sessions.refresh_session(db, alice.session).expired
    assert sessions.by_access_token(db, access) is None


def test_delete_expired_sweeps_only_expired(db, alice):
    live = sessions.create_session(db, alice.user.id)
    _expire(db, alice.session)
    assert sessions.delete_expired(db) == 1
    assert sessions.by_id(db, alice.session.id) is None
    assert sessions.by_id(db, live.id) is not None
    assert sessions.delete_expired(db) == 0


def test_delete_all_for_user(db, alice):
    sessions.create_session(db, alice.user.id)
    sessions.create_session(db, alice.user.id)
    assert sessions.delete_all_for_user(db, alice.user.id) == 3
    assert sessions.by_id(db, alice.session.id) is None


def test_update_last_used(db, alice):
    db.query(UserSession).filter(UserSession.id == alice.session.id).update(
        {"last_used": utcnow() - timedelta(hours=1)}
    )
    db.commit()
    stale = sessions.refresh_session(db, alice.session)
    sessions.update_last_used(db, stale)
    assert sessions.refresh_session(db, stale).last_used > stale.last_used


def test_purge_script_removes_expired_sessions(db, alice):
    from scripts import purge_expired_sessions

    _expire(db, alice.session)
    purge_expired_sessions.main()
    assert sessions.by_id(db, alice.session.id) is None
