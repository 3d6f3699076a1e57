from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from travel_packages.core.errors import UnauthorizedError
from travel_packages.db.session import get_db
from travel_packages.schemas.auth import CurrentSession
from travel_packages.services import auth as auth_service

# Key under which the session token is kept in the signed cookie payload.
SESSION_TOKEN_KEY = "sid"


def session_token(request: Request) -> str | None:
    """Session token carried by the request's signed cookie, if any."""
    token = request.session.get(SESSION_TOKEN_KEY)
    return token if isinstance(token, str) else None


# PUBLIC_INTERFACE
def get_current_session(request: Request, db: Session = Depends(get_db)) -> CurrentSession | None:
    """This is a public function.

    Resolve the caller's session once per request. A cookie that names no live
    session is dropped so the client stops sending it.
    """
    token = session_token(request)
    current = auth_service.resolve_session(db, token)
    if current is None and token is not None:
        request.session.pop(SESSION_TOKEN_KEY, None)
    return current


# PUBLIC_INTERFACE
def require_session(current: CurrentSession | None = Depends(get_current_session)) -> CurrentSession:
    """This is a public function.

    Gate for identity-requiring routes: passes the resolved session through,
    or raises UnauthorizedError before the handler runs.
    """
    if current is None:
        raise UnauthorizedError()
    return current
