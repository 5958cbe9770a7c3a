import pytest

from screentime_api.errors import AuthError, ConflictError, NotFoundError, PasswordRequiredError
from screentime_api.services import AuthService


@pytest.fixture
def auth(store):
    return AuthService(store)


def test_sign_up_and_sign_in(auth):
    user = auth.sign_up("new@example.com", "secret", "newbie")
    assert user.display_name == "newbie"
    assert not auth.check_session(user.user_oid)

    signed_in = auth.sign_in("NEW@example.com", "secret", user_tid=42)
    assert signed_in is user
    assert user.user_tid == 42
    assert auth.check_session(user.user_oid)
    assert auth.current_user(user.user_oid) is user


def test_sign_up_conflicts(auth):
    with pytest.raises(ConflictError):
        auth.sign_up("test@example.com", "secret", "someone")
    with pytest.raises(ConflictError):
        auth.sign_up("other@example.com", "secret", "JaneDoe")


def test_sign_in_errors(auth):
    with pytest.raises(NotFoundError):
        auth.sign_in("nobody@example.com", "secret")
    with pytest.raises(PasswordRequiredError):
        auth.sign_in("test@example.com", "secret")

    auth.create_password("test@example.com", "secret")
    with pytest.raises(AuthError):
        auth.sign_in("test@example.com", "wrong")


def test_create_password_signs_in(auth):
    user = auth.create_password("jane@example.com", "secret", user_tid=7)
    assert auth.check_session(user.user_oid)
    auth.sign_out(user.user_oid)
    assert not auth.check_session(user.user_oid)
    with pytest.raises(AuthError):
        auth.current_user(user.user_oid)


def test_chat_id_moves_between_accounts(auth, store):
    auth.create_password("test@example.com", "secret", user_tid=7)
    auth.create_password("jane@example.com", "secret", user_tid=7)
    assert store.users.get("user-1").user_tid is None
    assert store.users.get("user-2").user_tid == 7


def test_reset_password(auth):
    assert auth.reset_password("bob@example.com")
    assert not auth.reset_password("ghost@example.com")


def test_password_required_payload():
    assert PasswordRequiredError().to_dict()["requires_password_creation"] is True
