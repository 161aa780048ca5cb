"""
Authentication Router

Handles user authentication endpoints:
- Registration (email/password -> user + JWT)
- Login (email/password -> user + JWT)
- Current user profile (from JWT)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Both failure modes of login answer the same 401 so emails can't be probed
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from bookreview.config import get_settings
from bookreview.dependencies import CurrentUser, Users
from bookreview.schemas.user import AuthResponse, UserCreate, UserEnvelope, UserLogin
from bookreview.services.rate_limiter import limiter
from bookreview.services.security import create_access_token

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        409: {"description": "Conflict (email already exists)"},
    },
)


def issue_token(user: dict) -> str:
    return create_access_token(data={"sub": user["id"], "email": user["email"]})


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new user account and return it with an access token.

    **Password Requirements:**
    - Minimum 8 characters
    - At least 1 letter
    - At least 1 number
    """,
)
@limiter.limit("5/minute")  # Strict rate limit to prevent spam registrations
def register(
    request: Request,
    user_data: UserCreate,
    users: Users,
) -> AuthResponse:
    if users.find_by_email(user_data.email) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    user = users.create(
        {
            "email": user_data.email,
            "password": user_data.password,
            "name": user_data.name,
        }
    )

    logger.info(f"New user registered: {user['email']}")

    return AuthResponse(
        message="User registered successfully",
        user=user,
        token=issue_token(user),
    )


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
    description="Authenticate with a JSON body and receive an access token.",
)
@limiter.limit("10/minute")  # Prevent brute force attacks
def login(
    request: Request,
    credentials: UserLogin,
    users: Users,
) -> AuthResponse:
    user = users.find_by_email(credentials.email)

    if user is None or not users.verify_password(user, credentials.password):
        logger.warning(f"Failed login attempt for: {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"User logged in: {user['email']}")

    return AuthResponse(
        message="Login successful",
        user=user,
        token=issue_token(user),
    )


# -------------------------------------------------------------------------
# Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/profile",
    response_model=UserEnvelope,
    summary="Get current user",
    description="Get the profile of the currently authenticated user.",
)
def get_profile(current_user: CurrentUser) -> UserEnvelope:
    return UserEnvelope(user=current_user)
