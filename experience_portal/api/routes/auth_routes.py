"""
Authentication Routes

POST /auth/register - Register new user (returns token)
POST /auth/login - Login with email or username
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends

from experience_portal.core.auth import create_access_token, get_current_user
from experience_portal.core.security import verify_password
from experience_portal.core.logging import get_logger
from experience_portal.services.user_service import (
    UserService, DuplicateUserError, DUPLICATE_MESSAGES, get_user_service, to_user
)
from experience_portal.schemas.schemas import (
    RegisterRequest, LoginRequest, AuthResponse, MeResponse, UserResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger(__name__)


def _issue_token(user: dict) -> str:
    return create_access_token(data={"sub": str(user["id"])})


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(request: RegisterRequest, users: UserService = Depends(get_user_service)):
    """
    Register a new student or alumni account.

    Role defaults to alumni when isAlumni is set, otherwise student.
    """
    taken = users.exists(username=request.username, email=request.email)
    if taken:
        raise HTTPException(status_code=400, detail=DUPLICATE_MESSAGES[taken])

    role = request.role or ("alumni" if request.is_alumni else "student")
    try:
        user = users.create_user(
            name=request.name,
            username=request.username,
            email=request.email,
            password=request.password,
            role=role,
            branch=request.branch,
            graduation_year=request.graduation_year,
            is_alumni=request.is_alumni,
        )
    except DuplicateUserError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AuthResponse(token=_issue_token(user), user=UserResponse(**user))


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, users: UserService = Depends(get_user_service)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    if not request.identifier or not request.identifier.strip() or not request.password:
        raise HTTPException(status_code=400, detail="Please provide email/username and password")

    row = users.get_credentials(request.identifier)
    if not row or not verify_password(request.password, row["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    user = to_user(row)
    logger.info(f"User {user['id']} logged in")
    return AuthResponse(token=_issue_token(user), user=UserResponse(**user))


@router.get("/me", response_model=MeResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current user info."""
    return MeResponse(user=UserResponse(**user))
