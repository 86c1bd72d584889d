"""
User Routes

GET /users/profile - Get own profile
PUT /users/profile - Update profile (optionally a new password)
GET /users/{username} - Public profile with approved experiences
"""

from fastapi import APIRouter, HTTPException, Depends

from experience_portal.api.deps import get_experience_store
from experience_portal.core.auth import get_current_user
from experience_portal.services.experience_service import ExperienceStore, APPROVED
from experience_portal.services.user_service import UserService, get_user_service
from experience_portal.schemas.schemas import (
    MeResponse, ProfileUpdate, UserResponse, PublicUserResponse, PublicProfileResponse
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=MeResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    return MeResponse(user=UserResponse(**user))


@router.put("/profile", response_model=MeResponse)
async def update_profile(
    data: ProfileUpdate,
    user: dict = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Update own profile. Only provided fields are changed."""
    changes = data.model_dump(exclude_unset=True)
    updated = users.update_profile(user["id"], changes)
    return MeResponse(user=UserResponse(**updated))


@router.get("/{username}", response_model=PublicProfileResponse)
async def get_public_profile(
    username: str,
    users: UserService = Depends(get_user_service),
    store: ExperienceStore = Depends(get_experience_store),
):
    user = users.get_by_username(username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    experiences = store.find(status=APPROVED, author_id=user["id"])
    return PublicProfileResponse(user=PublicUserResponse(**user), experiences=experiences)
