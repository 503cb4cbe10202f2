import pytest

from stepauth.auth import credentials, proof_of_work, sessions, users
from stepauth.auth.errors import AlreadyUsed, Forbidden, InvalidRequest, NotFound
from stepauth.auth.roles import Role


def find_token(min_difficulty, exact=False):
    """Brute force a proof-of-work string; cheap for small difficulties."""
    i = 0
    while True:
        candidate = f"pow-{i}"
        d = proof_of_work.difficulty(candidate)
        if d == min_difficulty or (d > min_difficulty and not exact):
            return candidate
        i += 1


def test_register_creates_user_account_and_session(db, alice):
    assert alice.user.username == "alice"
    assert alice.user.email == "alice@example.com"
    assert alice.user.display_name == "alice"
    assert alice.user.role == Role.UNVERIFIED
    assert not alice.user.deleted
    assert alice.account.user_id == alice.user.id
    assert alice.session.user_id == alice.user.id
    assert users.is_username_taken(db, "alice")
    assert users.is_email_taken(db, "alice@example.com")
    assert not users.is_username_taken(db, "bob")


def test_register_with_display_name_and_role(db):
    reg = users.register_user(db, "carol", "carol@example.com", "hunter2hunter2", display_name="Carol", role=Role.USER)
    assert reg.user.display_name == "Carol"
    assert reg.user.role == Role.USER


def test_duplicate_username_or_email(db, alice):
    with pytest.raises(AlreadyUsed):
        users.register_user(db, "alice", "other@example.com", "password123")
    with pytest.raises(AlreadyUsed):
        users.register_user(db, "alice2", "alice@example.com", "password123")
    assert [u.username for u in users.list_users(db)] == ["alice"]


def test_delete_user_frees_identifiers(db, alice):
    deleted = users.delete_user(db, alice.user)
    assert deleted.deleted
    assert deleted.username is None
    assert deleted.email is None
    assert sessions.by_id(db, alice.session.id) is None
    with pytest.raises(NotFound):
        credentials.get_account_for_user(db, alice.user.id)
    # The name can be registered again by someone else
    again = users.register_user(db, "alice", "alice@example.com", "another password")
    assert again.user.id != alice.user.id


def test_get_user_not_found(db):
    with pytest.raises(NotFound):
        users.get_user(db, 404)


def test_ban_and_unban(db, alice):
    banned = users.ban_user(db, alice.user)
    assert banned.banned
    assert not users.unban_user(db, banned).banned


def test_set_role_and_display_name(db, alice):
    assert users.set_role(db, alice.user, Role.ADMIN).role == Role.ADMIN
    assert users.set_display_name(db, alice.user, "Alice A.").display_name == "Alice A."
    # Snapshot taken before the change is unchanged
    assert alice.user.role == Role.UNVERIFIED


def test_require_self_or_admin(db, alice):
    bob = users.register_user(db, "bob", "bob@example.com", "password123").user
    users.require_self_or_admin(alice.user, alice.user)
    with pytest.raises(Forbidden):
        users.require_self_or_admin(bob, alice.user)
    with pytest.raises(Forbidden):
        users.require_self_or_admin(users.set_role(db, bob, Role.MODERATOR), alice.user)
    users.require_self_or_admin(users.set_role(db, bob, Role.ADMIN), alice.user)


def test_proof_of_work_starts_empty(alice):
    assert alice.user.proof_of_work is None
    assert users.proof_of_work_difficulty(alice.user) == 0


def test_proof_of_work_never_decreases(db, alice):
    strong = find_token(4)
    weak = find_token(0, exact=True)

    updated = users.set_proof_of_work(db, alice.user, strong)
    assert updated.proof_of_work == strong
    assert users.proof_of_work_difficulty(updated) >= 4

    with pytest.raises(InvalidRequest):
        users.set_proof_of_work(db, updated, weak)
    with pytest.raises(InvalidRequest):
        users.set_proof_of_work(db, updated, None)
    assert users.refresh_user(db, updated).proof_of_work == strong


def test_proof_of_work_equal_difficulty_is_accepted(db, alice):
    first = find_token(0, exact=True)
    second = next(f"other-{i}" for i in range(1000) if proof_of_work.difficulty(f"other-{i}") == 0)
    users.set_proof_of_work(db, alice.user, first)
    assert users.set_proof_of_work(db, alice.user, second).proof_of_work == second


def test_proof_of_work_ignore_previous(db, alice):
    users.set_proof_of_work(db, alice.user, find_token(4))
    weak = find_token(0, exact=True)
    assert users.set_proof_of_work(db, alice.user, weak, ignore_previous=True).proof_of_work == weak
    assert users.set_proof_of_work(db, alice.user, None, ignore_previous=True).proof_of_work is None


def test_unencodable_text_is_not_stored(db, alice):
    with pytest.raises(InvalidRequest):
        users.register_user(db, "b\ud800b", "bob@example.com", "password123")
    with pytest.raises(InvalidRequest):
        users.register_user(db, "bob", "bob@example.com", "password123", display_name="\udfff")
    with pytest.raises(InvalidRequest):
        users.set_display_name(db, alice.user, "\ud800")
    with pytest.raises(InvalidRequest):
        users.set_proof_of_work(db, alice.user, "\udfff", ignore_previous=True)
    assert [u.username for u in users.list_users(db)] == ["alice"]
    assert users.refresh_user(db, alice.user).proof_of_work is None
