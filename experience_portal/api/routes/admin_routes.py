"""
Admin Routes (admin role required for every route)

GET /admin/stats - Dashboard counts
GET /admin/experiences/pending - Moderation queue
GET /admin/experiences?status= - Experiences by moderation status
PUT /admin/experiences/{id}/approve - Approve with optional notes
PUT /admin/experiences/{id}/reject - Reject with optional notes
DELETE /admin/experiences/{id} - Remove an experience
PUT /admin/experiences/{id}/standardize-company - Apply a canonical company name
GET /admin/reports?status= - Reports
PUT /admin/reports/{id} - Resolve or dismiss a report
GET|POST /admin/announcements - List / create announcements
PUT|DELETE /admin/announcements/{id} - Update / delete
GET /admin/companies - Company names in use with counts
GET|POST /admin/company-standardizations - List / create
PUT|DELETE /admin/company-standardizations/{id} - Update / delete
GET /admin/users - Users with filters
GET /admin/users/filters - User filter values
"""

from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from experience_portal.api.deps import get_experience_store, get_standardization_store, load_experience
from experience_portal.core.auth import require_admin
from experience_portal.core.logging import get_logger
from experience_portal.services.announcement_service import AnnouncementService, get_announcement_service
from experience_portal.services.comment_service import CommentService, get_comment_service
from experience_portal.services.experience_service import (
    ExperienceStore, InvalidIdError, PENDING, APPROVED, REJECTED
)
from experience_portal.services.report_service import ReportService, get_report_service
from experience_portal.services.standardization_service import StandardizationStore, DuplicateStandardError
from experience_portal.services.user_service import UserService, get_user_service
from experience_portal.schemas.schemas import (
    AdminStatsResponse, ExperienceResponse, ModerationRequest, ModerationStatus, MessageResponse,
    StandardizeCompanyRequest, ReportResponse, ReportReview, ReportStatus,
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse,
    CompanyNameCount, StandardizationCreate, StandardizationUpdate, StandardizationResponse,
    UserResponse, UserFilterOptions, UserRole
)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])
logger = get_logger(__name__)


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    store: ExperienceStore = Depends(get_experience_store),
    reports: ReportService = Depends(get_report_service),
    announcements: AnnouncementService = Depends(get_announcement_service),
    users: UserService = Depends(get_user_service),
):
    return AdminStatsResponse(
        experiences=store.count_by_status(),
        reports=reports.counts(),
        announcements=announcements.counts(),
        users=users.count_by_role(),
    )


# ============================================================
# EXPERIENCE MODERATION
# ============================================================

@router.get("/experiences/pending", response_model=List[ExperienceResponse])
async def get_pending_experiences(store: ExperienceStore = Depends(get_experience_store)):
    return store.find(status=PENDING)


@router.get("/experiences", response_model=List[ExperienceResponse])
async def list_experiences_by_status(
    status: Optional[ModerationStatus] = None,
    store: ExperienceStore = Depends(get_experience_store),
):
    """All experiences, or only those with the given moderation status."""
    return store.find(status=status.value if status else None)


def _moderate(store: ExperienceStore, experience_id: str, status: str, notes: Optional[str], admin: dict) -> dict:
    load_experience(store, experience_id)
    experience = store.set_moderation(experience_id, status, notes, admin["id"])
    logger.info(f"Experience {experience_id} {status} by admin {admin['id']}")
    return experience


@router.put("/experiences/{experience_id}/approve", response_model=ExperienceResponse)
async def approve_experience(
    experience_id: str,
    data: Optional[ModerationRequest] = None,
    admin: dict = Depends(require_admin),
    store: ExperienceStore = Depends(get_experience_store),
):
    return _moderate(store, experience_id, APPROVED, data.notes if data else None, admin)


@router.put("/experiences/{experience_id}/reject", response_model=ExperienceResponse)
async def reject_experience(
    experience_id: str,
    data: Optional[ModerationRequest] = None,
    admin: dict = Depends(require_admin),
    store: ExperienceStore = Depends(get_experience_store),
):
    return _moderate(store, experience_id, REJECTED, data.notes if data else None, admin)


@router.delete("/experiences/{experience_id}", response_model=MessageResponse)
async def delete_experience(
    experience_id: str,
    admin: dict = Depends(require_admin),
    store: ExperienceStore = Depends(get_experience_store),
    comments: CommentService = Depends(get_comment_service),
    reports: ReportService = Depends(get_report_service),
):
    load_experience(store, experience_id)
    store.delete(experience_id)
    comments.delete_for_experience(experience_id)
    reports.delete_for_experience(experience_id)
    logger.info(f"Experience {experience_id} deleted by admin {admin['id']}")
    return MessageResponse(message="Experience deleted successfully")


@router.put("/experiences/{experience_id}/standardize-company", response_model=ExperienceResponse)
async def standardize_company(
    experience_id: str,
    data: StandardizeCompanyRequest,
    store: ExperienceStore = Depends(get_experience_store),
):
    """Overwrite the experience's company with a canonical name."""
    experience = load_experience(store, experience_id)
    logger.info(f"Experience {experience_id} company '{experience['company']}' -> '{data.standard_name}'")
    return store.set_company(experience_id, data.standard_name)


# ============================================================
# REPORTS
# ============================================================

def _with_experience(report: dict, store: ExperienceStore) -> dict:
    try:
        report["experience"] = store.get(report["experience_id"])
    except InvalidIdError:
        report["experience"] = None
    return report


@router.get("/reports", response_model=List[ReportResponse])
async def list_reports(
    status: Optional[ReportStatus] = None,
    reports: ReportService = Depends(get_report_service),
    store: ExperienceStore = Depends(get_experience_store),
):
    return [_with_experience(r, store) for r in reports.list(status.value if status else None)]


@router.put("/reports/{report_id}", response_model=ReportResponse)
async def review_report(
    report_id: int,
    data: ReportReview,
    admin: dict = Depends(require_admin),
    reports: ReportService = Depends(get_report_service),
    store: ExperienceStore = Depends(get_experience_store),
):
    report = reports.review(report_id, data.status, admin["id"], data.admin_notes)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    return _with_experience(report, store)


# ============================================================
# ANNOUNCEMENTS
# ============================================================

@router.get("/announcements", response_model=List[AnnouncementResponse])
async def list_all_announcements(announcements: AnnouncementService = Depends(get_announcement_service)):
    return announcements.list_all()


@router.post("/announcements", response_model=AnnouncementResponse, status_code=201)
async def create_announcement(
    data: AnnouncementCreate,
    admin: dict = Depends(require_admin),
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    return announcements.create(data.model_dump(), admin["id"])


@router.put("/announcements/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: int,
    data: AnnouncementUpdate,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    announcement = announcements.update(announcement_id, data.model_dump(exclude_unset=True))
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")
    return announcement


@router.delete("/announcements/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(
    announcement_id: int,
    announcements: AnnouncementService = Depends(get_announcement_service),
):
    if not announcements.delete(announcement_id):
        raise HTTPException(status_code=404, detail="Announcement not found")
    return MessageResponse(message="Announcement deleted successfully")


# ============================================================
# COMPANY STANDARDIZATION
# ============================================================

@router.get("/companies", response_model=List[CompanyNameCount])
async def list_company_names(store: ExperienceStore = Depends(get_experience_store)):
    return store.company_counts()


@router.get("/company-standardizations", response_model=List[StandardizationResponse])
async def list_standardizations(standards: StandardizationStore = Depends(get_standardization_store)):
    return standards.list()


@router.post("/company-standardizations", response_model=StandardizationResponse, status_code=201)
async def create_standardization(
    data: StandardizationCreate,
    admin: dict = Depends(require_admin),
    standards: StandardizationStore = Depends(get_standardization_store),
):
    try:
        return standards.create(data.standard_name, data.variations, admin["id"])
    except DuplicateStandardError:
        raise HTTPException(status_code=400, detail="Standardization already exists for this company name")


@router.put("/company-standardizations/{standardization_id}", response_model=StandardizationResponse)
async def update_standardization(
    standardization_id: str,
    data: StandardizationUpdate,
    standards: StandardizationStore = Depends(get_standardization_store),
):
    try:
        standard = standards.update(standardization_id, data.standard_name, data.variations)
    except InvalidIdError:
        raise HTTPException(status_code=400, detail="Invalid standardization ID format")
    except DuplicateStandardError:
        raise HTTPException(status_code=400, detail="Standardization already exists for this company name")
    if not standard:
        raise HTTPException(status_code=404, detail="Standardization not found")
    return standard


@router.delete("/company-standardizations/{standardization_id}", response_model=MessageResponse)
async def delete_standardization(
    standardization_id: str,
    standards: StandardizationStore = Depends(get_standardization_store),
):
    try:
        deleted = standards.delete(standardization_id)
    except InvalidIdError:
        raise HTTPException(status_code=400, detail="Invalid standardization ID format")
    if not deleted:
        raise HTTPException(status_code=404, detail="Standardization not found")
    return MessageResponse(message="Standardization deleted successfully")


# ============================================================
# USERS
# ============================================================

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    branch: Optional[str] = None,
    graduation_year: Optional[int] = Query(None, alias="graduationYear"),
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
    users: UserService = Depends(get_user_service),
):
    return users.list_users(
        branch=branch,
        graduation_year=graduation_year,
        role=role.value if role else None,
        search=search,
    )


@router.get("/users/filters", response_model=UserFilterOptions)
async def get_user_filters(users: UserService = Depends(get_user_service)):
    return users.filter_options()
