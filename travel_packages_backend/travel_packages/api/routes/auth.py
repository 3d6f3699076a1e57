from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from travel_packages.api.deps import SESSION_TOKEN_KEY, require_session, session_token
from travel_packages.db.session import AppContext, get_context, get_db
from travel_packages.schemas.auth import CurrentSession, LoginRequest, SignupRequest
from travel_packages.services import auth as auth_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/signup",
    response_class=PlainTextResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create a user account. Does not log the user in.",
    operation_id="signup",
)
def signup(payload: SignupRequest, db: Session = Depends(get_db)) -> str:
    """Create a user.

    Args:
        payload: SignupRequest payload.
        db: SQLAlchemy Session (FastAPI dependency).

    Returns:
        str: Confirmation text.

    Raises:
        ConflictError: 400 if the email or username is taken.
    """
    auth_service.signup(db, email=payload.email, username=payload.username, password=payload.password)
    return "Signup successful"


@router.post(
    "/login",
    response_class=PlainTextResponse,
    summary="Log in",
    description="Verify credentials and start a session; the session token is returned in a signed cookie.",
    operation_id="login",
)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> str:
    """Log a user in.

    Raises:
        InvalidCredentialsError: 400 for an unknown username or a wrong password.
    """
    current = auth_service.login(
        db,
        username=payload.username,
        password=payload.password,
        ttl_seconds=context.settings.session_max_age,
    )
    # Replace rather than reuse whatever session the client already had.
    previous = session_token(request)
    if previous is not None and previous != current.token:
        auth_service.logout(db, previous)
    request.session.clear()
    request.session[SESSION_TOKEN_KEY] = current.token
    return "Login successful"


@router.get(
    "/logout",
    response_class=PlainTextResponse,
    summary="Log out",
    description="Destroy the caller's session and clear the session cookie. Succeeds even without a session.",
    operation_id="logout",
)
def logout(request: Request, db: Session = Depends(get_db)) -> str:
    """Log the caller out.

    Raises:
        SessionStoreError: 500 if the session cannot be destroyed.
    """
    auth_service.logout(db, session_token(request))
    request.session.clear()
    return "Logout successful"


@router.get(
    "/protected",
    response_class=PlainTextResponse,
    summary="Protected example",
    description="Only reachable with a live session.",
    operation_id="protected",
)
def protected(current: CurrentSession = Depends(require_session)) -> str:
    return "You are authenticated"
