import logging
from typing import Optional

from werkzeug.security import generate_password_hash, check_password_hash

from ..errors import AuthError, ConflictError, NotFoundError, PasswordRequiredError, ValidationError
from ..models import User, new_oid
from ..store import MemoryStore

logger = logging.getLogger(__name__)


class AuthService:
    """Stand-in for a hosted auth backend: users, password hashes and signed-in sessions, all in memory."""

    def __init__(self, store: MemoryStore):
        self.store = store

    def find_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return self.store.users.find_one(lambda user: user.email.lower() == email)

    def get_user(self, user_oid: str) -> User:
        user = self.store.users.get(user_oid)
        if not user:
            raise NotFoundError("User not found")
        return user

    def sign_up(self, email: str, password: str, username: str) -> User:
        email, username = email.strip(), username.strip()
        if not email or not password or not username:
            raise ValidationError("Email, username and password are required")
        if self.find_by_email(email):
            raise ConflictError("User with this email already exists")
        if self.store.users.find_one(lambda user: (user.username or "").lower() == username.lower()):
            raise ConflictError("Username is already taken")

        user = User(user_oid=new_oid(), email=email, username=username)
        self.store.users.insert(user)
        self.store.passwords[email.lower()] = generate_password_hash(password)
        logger.info("Signed up user %s", user.user_oid)
        return user

    def sign_in(self, email: str, password: str, user_tid: Optional[int] = None) -> User:
        user = self.find_by_email(email)
        if not user:
            logger.warning("Sign in attempt for unknown email")
            raise NotFoundError("User not found")

        stored_hash = self.store.passwords.get(user.email.lower())
        if stored_hash is None:
            raise PasswordRequiredError()
        if not check_password_hash(stored_hash, password):
            logger.warning("Incorrect password for user %s", user.user_oid)
            raise AuthError("Incorrect password")

        if user_tid is not None:
            self._link_telegram(user, user_tid)
        self.store.sessions.add(user.user_oid)
        logger.info("User %s signed in", user.user_oid)
        return user

    def create_password(self, email: str, password: str, user_tid: Optional[int] = None) -> User:
        user = self.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        if not password:
            raise ValidationError("Password must not be empty")

        self.store.passwords[user.email.lower()] = generate_password_hash(password)
        if user_tid is not None:
            self._link_telegram(user, user_tid)
        self.store.sessions.add(user.user_oid)
        logger.info("Password created for user %s", user.user_oid)
        return user

    def reset_password(self, email: str) -> bool:
        # Nothing is sent, existence is all we can report
        return self.find_by_email(email) is not None

    def sign_out(self, user_oid: str):
        self.store.sessions.discard(user_oid)
        logger.info("User %s signed out", user_oid)

    def check_session(self, user_oid: str) -> bool:
        return user_oid in self.store.sessions

    def current_user(self, user_oid: str) -> User:
        if not self.check_session(user_oid):
            raise AuthError("Not signed in")
        return self.get_user(user_oid)

    def _link_telegram(self, user: User, user_tid: int):
        for other in self.store.users.find(user_tid=user_tid):
            if other.user_oid != user.user_oid:
                other.user_tid = None
        user.user_tid = user_tid
