"""Credential store: user lookup, password verification and registration."""

import logging
from functools import lru_cache

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from roster.core.errors import AuthError, AuthErrorKind, StorageError, ValidationError
from roster.core.security import (
    BCRYPT_ROUNDS,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    is_valid_password,
    is_valid_username,
    verify_password,
)
from roster.models import User
from roster.schemas.auth import DEFAULT_ROLE, ROLE_VALUES

logger = logging.getLogger(__name__)


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    # Checked against when the username is unknown, so both failure paths pay for one bcrypt run.
    return hash_password("not-a-real-password", rounds=rounds)


def validate_registration(username: str, password: str, role: str) -> ValidationError | None:
    """Return a ValidationError listing every bad field, or None."""
    errors: list[dict[str, str]] = []
    if not is_valid_username(username):
        errors.append(
            {
                "field": "username",
                "message": f"must be {USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} letters or digits",
            }
        )
    if not is_valid_password(password):
        errors.append(
            {
                "field": "password",
                "message": f"must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters",
            }
        )
    if role not in ROLE_VALUES:
        errors.append(
            {"field": "role", "message": f"must be one of {sorted(ROLE_VALUES)}"}
        )
    return ValidationError(errors) if errors else None


class CredentialStore:
    """Looks up users and checks passwords against their bcrypt hashes."""

    def __init__(self, db: Session, rounds: int = BCRYPT_ROUNDS) -> None:
        self.db = db
        self.rounds = rounds

    def get(self, user_id: int) -> User | None:
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as e:
            raise StorageError("user lookup failed", cause=e) from e

    def verify(self, username: str, password: str) -> User | AuthError:
        """
        Return the user when username/password match.

        Unknown usernames and wrong passwords both yield INVALID_CREDENTIALS.
        """
        try:
            user = self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError as e:
            raise StorageError("user lookup failed", cause=e) from e
        if user is None:
            verify_password(password, _dummy_hash(self.rounds))
            return AuthError(AuthErrorKind.INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            return AuthError(AuthErrorKind.INVALID_CREDENTIALS)
        return user

    def register(
        self, username: str, password: str, role: str | None = None
    ) -> User | ValidationError | AuthError:
        """
        Validate, hash and insert a new user.

        Returns ValidationError for bad input (nothing is written) and
        AuthError(DUPLICATE_USERNAME) when the username is taken.
        """
        role = role if role is not None else DEFAULT_ROLE
        invalid = validate_registration(username, password, role)
        if invalid is not None:
            return invalid

        user = User(
            username=username,
            password_hash=hash_password(password, rounds=self.rounds),
            role=role,
        )
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return AuthError(AuthErrorKind.DUPLICATE_USERNAME)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("user insert failed", cause=e) from e
        self.db.refresh(user)
        logger.info("Registered user id=%s username=%s role=%s", user.id, user.username, user.role)
        return user
