"""Session auth service: signup, login, logout and session resolution.

Sessions are rows in the `sessions` table keyed by an opaque random token.
The HTTP layer only ever stores that token (inside a signed cookie).
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from travel_packages.core.errors import (
    BackendUnavailableError,
    ConflictError,
    InvalidCredentialsError,
    SessionStoreError,
)
from travel_packages.db.models import AuthSession, User
from travel_packages.schemas.auth import CurrentSession

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10

# bcrypt only reads the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72

# Compared against when the username is unknown so both failure paths cost one bcrypt check.
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Salted bcrypt hash of `password` at cost factor 10."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Constant-time check of `password` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


# PUBLIC_INTERFACE
def signup(db: Session, *, email: str, username: str, password: str) -> User:
    """This is a public function.

    Create a user. No session is created; logging in is a separate step.

    Raises:
        ConflictError: if the email or the username is already taken.
        BackendUnavailableError: if the store fails.
    """
    user = User(
        email=email,
        username=username,
        password=hash_password(password),
        created_at=_utcnow(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Signup rejected for username=%s: email or username taken", username)
        raise ConflictError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise BackendUnavailableError() from exc

    logger.info("Signed up user id=%s username=%s", user.id, username)
    return user


# PUBLIC_INTERFACE
def login(db: Session, *, username: str, password: str, ttl_seconds: int) -> CurrentSession:
    """This is a public function.

    Verify credentials and open a new session for the user.

    Raises:
        InvalidCredentialsError: unknown username or wrong password (not distinguished).
        SessionStoreError: if the session row cannot be written.
        BackendUnavailableError: if the user lookup fails.
    """
    try:
        user = db.execute(select(User).where(User.username == username)).scalars().first()
    except SQLAlchemyError as exc:
        raise BackendUnavailableError() from exc

    if user is None:
        verify_password(password, _DUMMY_HASH.decode("utf-8"))
        logger.info("Login failed for username=%s", username)
        raise InvalidCredentialsError()
    if not verify_password(password, user.password):
        logger.info("Login failed for username=%s", username)
        raise InvalidCredentialsError()

    now = _utcnow()
    record = AuthSession(
        id=secrets.token_urlsafe(32),
        user_id=user.id,
        created_at=now,
        expires_at=now + timedelta(seconds=ttl_seconds),
    )
    db.add(record)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise SessionStoreError() from exc

    logger.info("User id=%s logged in", user.id)
    return CurrentSession(
        token=record.id,
        user_id=user.id,
        username=user.username,
        expires_at=record.expires_at,
    )


# PUBLIC_INTERFACE
def resolve_session(db: Session, token: str | None) -> CurrentSession | None:
    """This is a public function.

    Look up the live session named by `token`.

    Returns:
        CurrentSession, or None if there is no token, no such session, or the
        session has expired (expired rows are deleted on the way).

    Raises:
        SessionStoreError: if the session store cannot be read.
    """
    if not token:
        return None

    try:
        row = db.execute(
            select(AuthSession, User.username)
            .join(User, User.id == AuthSession.user_id)
            .where(AuthSession.id == token)
        ).first()
        if row is None:
            return None

        record, username = row
        expires_at = _as_utc(record.expires_at)
        if expires_at <= _utcnow():
            db.delete(record)
            db.commit()
            logger.info("Session for user id=%s expired", record.user_id)
            return None
    except SQLAlchemyError as exc:
        db.rollback()
        raise SessionStoreError() from exc

    return CurrentSession(
        token=record.id,
        user_id=record.user_id,
        username=username,
        expires_at=expires_at,
    )


# PUBLIC_INTERFACE
def logout(db: Session, token: str | None) -> bool:
    """This is a public function.

    Destroy the session named by `token`. The delete is committed before
    returning, so no later request can resolve the same token.

    Returns:
        bool: True if a session row was removed, False if there was none
        (which is not an error).

    Raises:
        SessionStoreError: if the delete cannot complete.
    """
    if not token:
        return False

    try:
        result = db.execute(delete(AuthSession).where(AuthSession.id == token))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise SessionStoreError() from exc

    removed = result.rowcount > 0
    if removed:
        logger.info("Session destroyed")
    return removed


# PUBLIC_INTERFACE
def purge_expired_sessions(db: Session) -> int:
    """This is a public function.

    Delete every expired session.

    Returns:
        int: Number of sessions removed.
    """
    try:
        expired = db.execute(select(AuthSession).where(AuthSession.expires_at <= _utcnow())).scalars().all()
        for record in expired:
            db.delete(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise SessionStoreError() from exc

    logger.info("Purged %d expired sessions", len(expired))
    return len(expired)
