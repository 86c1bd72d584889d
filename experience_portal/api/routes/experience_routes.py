"""
Experience Routes

GET /experiences - List approved experiences (filters + search)
GET /experiences/filters - Distinct filter values
GET /experiences/my - Own submissions, every moderation status
GET /experiences/{id} - Detail (counts a view)
POST /experiences - Submit (anonymous allowed with authorName)
PUT /experiences/{id} - Update (author or admin)
DELETE /experiences/{id} - Delete (author or admin)
DELETE /experiences/{id}/rounds/{round_number} - Remove one round
GET /experiences/{id}/comments - List comments
POST /experiences/{id}/comments - Add comment
POST /experiences/{id}/report - Report an experience
"""

from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends

from experience_portal.api.deps import get_experience_store, load_experience
from experience_portal.core.auth import get_current_user, get_optional_user, is_owner_or_admin
from experience_portal.core.logging import get_logger
from experience_portal.services.comment_service import CommentService, get_comment_service
from experience_portal.services.experience_service import ExperienceStore, APPROVED, remove_round
from experience_portal.services.report_service import ReportService, get_report_service
from experience_portal.schemas.schemas import (
    ExperienceCreate, ExperienceUpdate, ExperienceResponse, FilterOptionsResponse,
    CommentCreate, CommentResponse, ReportCreate, ReportResponse, MessageResponse
)

router = APIRouter(prefix="/experiences", tags=["Experiences"])
logger = get_logger(__name__)


def _visible_experience(store: ExperienceStore, experience_id: str, user: Optional[dict]) -> dict:
    """Approved experiences are public; others only for the author or an admin."""
    experience = load_experience(store, experience_id)
    if experience["moderation_status"] != APPROVED and not is_owner_or_admin(user, experience.get("author_id")):
        raise HTTPException(status_code=404, detail="Experience not found")
    return experience


def _owned_experience(store: ExperienceStore, experience_id: str, user: dict) -> dict:
    experience = load_experience(store, experience_id)
    if not is_owner_or_admin(user, experience.get("author_id")):
        raise HTTPException(status_code=403, detail="Not authorized to modify this experience")
    return experience


@router.get("", response_model=List[ExperienceResponse])
async def list_experiences(
    company: Optional[str] = None,
    role: Optional[str] = None,
    branch: Optional[str] = None,
    year: Optional[int] = None,
    search: Optional[str] = None,
    store: ExperienceStore = Depends(get_experience_store),
):
    """Approved experiences, newest first."""
    return store.find(company=company, role=role, branch=branch, year=year, search=search)


@router.get("/filters", response_model=FilterOptionsResponse)
async def get_filter_options(store: ExperienceStore = Depends(get_experience_store)):
    return store.filter_options()


@router.get("/my", response_model=List[ExperienceResponse])
async def get_my_experiences(
    user: dict = Depends(get_current_user),
    store: ExperienceStore = Depends(get_experience_store),
):
    return store.find(status=None, author_id=user["id"])


@router.get("/{experience_id}", response_model=ExperienceResponse)
async def get_experience(
    experience_id: str,
    user: Optional[dict] = Depends(get_optional_user),
    store: ExperienceStore = Depends(get_experience_store),
):
    """Get one experience. Every successful read adds one view."""
    _visible_experience(store, experience_id, user)
    experience = store.increment_views(experience_id)
    if not experience:
        raise HTTPException(status_code=404, detail="Experience not found")
    return experience


@router.post("", response_model=ExperienceResponse, status_code=201)
async def create_experience(
    data: ExperienceCreate,
    user: Optional[dict] = Depends(get_optional_user),
    store: ExperienceStore = Depends(get_experience_store),
):
    """
    Submit an experience. It waits for admin approval before it is listed.

    Logged-in users post under their name; anonymous posts must give authorName.
    """
    if user:
        author_id, author_name = user["id"], user["name"]
    elif data.author_name:
        author_id, author_name = None, data.author_name
    else:
        raise HTTPException(status_code=400, detail="Author name is required for anonymous submissions")

    payload = data.model_dump(exclude={"author_name"})
    return store.create(payload, author_id=author_id, author_name=author_name)


@router.put("/{experience_id}", response_model=ExperienceResponse)
async def update_experience(
    experience_id: str,
    data: ExperienceUpdate,
    user: dict = Depends(get_current_user),
    store: ExperienceStore = Depends(get_experience_store),
):
    _owned_experience(store, experience_id, user)
    return store.update(experience_id, data.model_dump(exclude_unset=True))


@router.delete("/{experience_id}", response_model=MessageResponse)
async def delete_experience(
    experience_id: str,
    user: dict = Depends(get_current_user),
    store: ExperienceStore = Depends(get_experience_store),
    comments: CommentService = Depends(get_comment_service),
    reports: ReportService = Depends(get_report_service),
):
    _owned_experience(store, experience_id, user)
    store.delete(experience_id)
    comments.delete_for_experience(experience_id)
    reports.delete_for_experience(experience_id)
    logger.info(f"Experience {experience_id} deleted by user {user['id']}")
    return MessageResponse(message="Experience deleted successfully")


@router.delete("/{experience_id}/rounds/{round_number}", response_model=ExperienceResponse)
async def delete_round(
    experience_id: str,
    round_number: int,
    user: dict = Depends(get_current_user),
    store: ExperienceStore = Depends(get_experience_store),
):
    """Remove one round; the remaining rounds are renumbered 1..n."""
    experience = _owned_experience(store, experience_id, user)
    rounds = experience.get("rounds", [])
    if len(rounds) <= 1:
        raise HTTPException(status_code=400, detail="An experience must keep at least one round")
    try:
        remaining = remove_round(rounds, round_number)
    except KeyError:
        raise HTTPException(status_code=404, detail="Round not found")
    return store.replace_rounds(experience_id, remaining)


# ============================================================
# COMMENTS / REPORTS
# ============================================================

@router.get("/{experience_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    experience_id: str,
    user: Optional[dict] = Depends(get_optional_user),
    store: ExperienceStore = Depends(get_experience_store),
    comments: CommentService = Depends(get_comment_service),
):
    _visible_experience(store, experience_id, user)
    return comments.list_for_experience(experience_id)


@router.post("/{experience_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    experience_id: str,
    data: CommentCreate,
    user: dict = Depends(get_current_user),
    store: ExperienceStore = Depends(get_experience_store),
    comments: CommentService = Depends(get_comment_service),
):
    _visible_experience(store, experience_id, user)
    return comments.create(experience_id, user["id"], data.content)


@router.post("/{experience_id}/report", response_model=ReportResponse, status_code=201)
async def report_experience(
    experience_id: str,
    data: ReportCreate,
    user: dict = Depends(get_current_user),
    store: ExperienceStore = Depends(get_experience_store),
    reports: ReportService = Depends(get_report_service),
):
    _visible_experience(store, experience_id, user)
    if reports.has_open_report(experience_id, user["id"]):
        raise HTTPException(status_code=400, detail="You have already reported this experience")
    return reports.create(experience_id, user["id"], data.reason, data.description)
