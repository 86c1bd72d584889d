"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON uses camelCase (roundNumber, moderationStatus, ...); snake_case is
accepted on input too.
"""

import re
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import date, datetime
from enum import Enum

from experience_portal.core.config import get_settings


USERNAME_PATTERN = re.compile(r"^[a-z0-9_]+$")
EMAIL_LOCAL_PATTERN = r"[a-zA-Z0-9._-]+"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,  # enum defaults are stored as plain strings too
    )


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"
    admin = "admin"


class OfferStatus(str, Enum):
    selected = "Selected"
    not_selected = "Not Selected"
    pending = "Pending"


class ModerationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class QuestionLevel(str, Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"


class ReportReason(str, Enum):
    spam = "spam"
    inappropriate = "inappropriate"
    inaccurate_information = "inaccurate_information"
    duplicate = "duplicate"
    other = "other"


class ReportStatus(str, Enum):
    pending = "pending"
    resolved = "resolved"
    dismissed = "dismissed"


class AnnouncementType(str, Enum):
    general = "general"
    placement = "placement"
    important = "important"


class AnnouncementPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


def _clean_required(value: str, field: str) -> str:
    value = value.strip() if isinstance(value, str) else value
    if not value:
        raise ValueError(f"{field} cannot be empty")
    return value


def normalize_username(value: str) -> str:
    """Trim, lowercase and validate a username. Raises ValueError."""
    username = str(value or "").strip().lower()
    if not username:
        raise ValueError("Username cannot be empty")
    if not USERNAME_PATTERN.match(username):
        raise ValueError("Username can only contain lowercase letters, numbers, and underscores")
    if len(username) < 3 or len(username) > 20:
        raise ValueError("Username must be between 3 and 20 characters")
    return username


def check_email_domain(email: str, domains: List[str]) -> str:
    """Lowercase an email and require one of the allowed domains. Raises ValueError."""
    email = email.strip().lower()
    pattern = rf"^{EMAIL_LOCAL_PATTERN}@({'|'.join(re.escape(d) for d in domains)})$"
    if not re.match(pattern, email):
        allowed = " or ".join(f"@{d}" for d in domains)
        raise ValueError(f"Email must be from {allowed} domain")
    return email


# ============================================================
# AUTH / USER SCHEMAS
# ============================================================

class ProfileLinks(CamelModel):
    bio: Optional[str] = Field(None, max_length=500)
    linkedin: Optional[str] = None
    github: Optional[str] = None
    twitter: Optional[str] = None


class RegisterRequest(CamelModel):
    name: str
    username: str
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[UserRole] = None
    branch: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    is_alumni: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _clean_required(v, "Name")

    @field_validator("username")
    @classmethod
    def username_format(cls, v: str) -> str:
        return normalize_username(v)

    @field_validator("email")
    @classmethod
    def email_domain(cls, v: str) -> str:
        return check_email_domain(v, get_settings().email_domains)

    @field_validator("role")
    @classmethod
    def no_self_admin(cls, v: Optional[UserRole]) -> Optional[UserRole]:
        if v == UserRole.admin:
            raise ValueError("Cannot register as admin")
        return v

    @field_validator("branch")
    @classmethod
    def strip_branch(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v else None


class LoginRequest(CamelModel):
    identifier: Optional[str] = None  # email or username
    password: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    name: str
    username: str
    email: str
    role: str
    branch: Optional[str] = None
    graduation_year: Optional[int] = None
    current_company: Optional[str] = None
    is_alumni: bool = False
    profile: ProfileLinks = ProfileLinks()
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    user: UserResponse


class MeResponse(CamelModel):
    success: bool = True
    user: UserResponse


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    branch: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    current_company: Optional[str] = None
    is_alumni: Optional[bool] = None
    profile: Optional[ProfileLinks] = None
    password: Optional[str] = Field(None, min_length=6)


class PublicUserResponse(CamelModel):
    id: int
    name: str
    username: str
    role: str
    branch: Optional[str] = None
    graduation_year: Optional[int] = None
    current_company: Optional[str] = None
    is_alumni: bool = False
    profile: ProfileLinks = ProfileLinks()


# ============================================================
# EXPERIENCE SCHEMAS
# ============================================================

class RoundSchema(CamelModel):
    round_number: int = Field(..., ge=1)
    round_name: str
    questions: List[str] = []
    feedback: str = ""
    difficulty: QuestionLevel = QuestionLevel.medium

    @field_validator("round_name")
    @classmethod
    def round_name_not_blank(cls, v: str) -> str:
        return _clean_required(v, "Round name")

    @field_validator("questions")
    @classmethod
    def drop_blank_questions(cls, v: List[str]) -> List[str]:
        return [q.strip() for q in v if q and q.strip()]


def _check_round_order(rounds: Optional[List[RoundSchema]]):
    if not rounds:
        return
    numbers = [r.round_number for r in rounds]
    if any(b <= a for a, b in zip(numbers, numbers[1:])):
        raise ValueError("Round numbers must be unique and increasing")


class ExperienceCreate(CamelModel):
    company: str
    role: str
    branch: str
    year: int = Field(..., ge=2000, le=2100)
    rounds: List[RoundSchema] = Field(..., min_length=1)
    package: Optional[str] = None
    tips: str = ""
    interview_date: Optional[date] = None
    offer_status: OfferStatus = OfferStatus.pending
    author_name: Optional[str] = None  # required when posting anonymously

    @field_validator("company", "role", "branch")
    @classmethod
    def required_text(cls, v: str, info) -> str:
        return _clean_required(v, info.field_name.capitalize())

    @field_validator("package", "author_name")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() or None if v else None

    @model_validator(mode="after")
    def rounds_in_order(self):
        _check_round_order(self.rounds)
        return self


class ExperienceUpdate(CamelModel):
    company: Optional[str] = None
    role: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[int] = Field(None, ge=2000, le=2100)
    rounds: Optional[List[RoundSchema]] = Field(None, min_length=1)
    package: Optional[str] = None
    tips: Optional[str] = None
    interview_date: Optional[date] = None
    offer_status: Optional[OfferStatus] = None

    @field_validator("company", "role", "branch")
    @classmethod
    def required_text(cls, v: Optional[str], info) -> Optional[str]:
        if v is None:
            return v
        return _clean_required(v, info.field_name.capitalize())

    @model_validator(mode="after")
    def rounds_in_order(self):
        _check_round_order(self.rounds)
        return self


class ExperienceResponse(CamelModel):
    id: str
    company: str
    role: str
    branch: str
    year: int
    rounds: List[RoundSchema]
    package: Optional[str] = None
    tips: str = ""
    interview_date: Optional[datetime] = None
    offer_status: str = OfferStatus.pending.value
    moderation_status: str = ModerationStatus.pending.value
    moderation_notes: Optional[str] = None
    views: int = 0
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExperienceSummary(CamelModel):
    id: str
    company: str
    role: str
    offer_status: str = OfferStatus.pending.value
    moderation_status: str = ModerationStatus.pending.value


class FilterOptionsResponse(CamelModel):
    companies: List[str] = []
    roles: List[str] = []
    branches: List[str] = []
    years: List[int] = []


class PublicProfileResponse(CamelModel):
    success: bool = True
    user: PublicUserResponse
    experiences: List[ExperienceResponse] = []


# ============================================================
# INSIGHTS SCHEMAS
# ============================================================

class OverviewStats(CamelModel):
    total_experiences: int
    unique_companies: int
    unique_roles: int
    avg_package: str
    max_package: float
    min_package: float


class FrequentQuestion(CamelModel):
    question: str
    count: int


class PackageTrend(CamelModel):
    value: float
    company: str
    role: str
    year: int


class InsightsResponse(CamelModel):
    overview: OverviewStats
    frequent_questions: List[FrequentQuestion]
    company_distribution: Dict[str, int]
    year_distribution: Dict[str, int]
    role_distribution: Dict[str, int]
    package_trends: List[PackageTrend]


class QuestionEntry(CamelModel):
    question: str
    company: str
    role: str
    round_number: int
    round_name: str
    year: Optional[int] = None
    level: str


class QuestionSearchResponse(CamelModel):
    success: bool = True
    questions: List[QuestionEntry]
    available_roles: List[str] = []
    total: int = 0


class CompanySummary(CamelModel):
    name: str
    total_experiences: int
    roles: List[str]
    branches: List[str]
    years: List[int]
    packages: List[str]


# ============================================================
# COMMENT / REPORT SCHEMAS
# ============================================================

class CommentCreate(CamelModel):
    content: str = Field(..., max_length=1000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _clean_required(v, "Comment")


class CommentResponse(CamelModel):
    id: int
    experience_id: str
    author_id: int
    author_name: Optional[str] = None
    author_username: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None


class ReportCreate(CamelModel):
    reason: ReportReason
    description: Optional[str] = Field(None, max_length=1000)


class ReportReview(CamelModel):
    status: ReportStatus
    admin_notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def must_close(cls, v: ReportStatus) -> ReportStatus:
        if v == ReportStatus.pending:
            raise ValueError("Review status must be resolved or dismissed")
        return v


class ReportResponse(CamelModel):
    id: int
    experience_id: str
    reported_by: int
    reporter_name: Optional[str] = None
    reason: str
    description: Optional[str] = None
    status: str
    admin_notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    experience: Optional[ExperienceSummary] = None


# ============================================================
# ANNOUNCEMENT SCHEMAS
# ============================================================

class AnnouncementCreate(CamelModel):
    title: str = Field(..., max_length=200)
    content: str
    type: AnnouncementType = AnnouncementType.general
    priority: AnnouncementPriority = AnnouncementPriority.medium
    expires_at: Optional[datetime] = None
    is_active: bool = True

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        return _clean_required(v, info.field_name.capitalize())


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    type: Optional[AnnouncementType] = None
    priority: Optional[AnnouncementPriority] = None
    expires_at: Optional[datetime] = None
    is_active: Optional[bool] = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: Optional[str], info) -> Optional[str]:
        return _clean_required(v, info.field_name.capitalize()) if v is not None else v

    @model_validator(mode="after")
    def no_null_for_required_columns(self):
        # expires_at is the only nullable column; null there clears the expiry
        for name in self.model_fields_set:
            if name != "expires_at" and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self


class AnnouncementResponse(CamelModel):
    id: int
    title: str
    content: str
    type: str
    priority: str
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_active: bool
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None


# ============================================================
# ADMIN SCHEMAS
# ============================================================

class ModerationRequest(CamelModel):
    notes: Optional[str] = None


class StandardizationCreate(CamelModel):
    standard_name: str
    variations: List[str] = []

    @field_validator("standard_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _clean_required(v, "Standard name")


class StandardizationUpdate(CamelModel):
    standard_name: Optional[str] = Field(None, min_length=1)
    variations: Optional[List[str]] = None

    @field_validator("standard_name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _clean_required(v, "Standard name") if v is not None else v


class StandardizationResponse(CamelModel):
    id: str
    standard_name: str
    variations: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StandardizeCompanyRequest(CamelModel):
    standard_name: str

    @field_validator("standard_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _clean_required(v, "Standard name")


class CompanyNameCount(CamelModel):
    name: str
    count: int


class ExperienceCounts(CamelModel):
    total: int
    pending: int
    approved: int
    rejected: int


class ReportCounts(CamelModel):
    total: int
    pending: int


class AnnouncementCounts(CamelModel):
    total: int
    active: int


class UserCounts(CamelModel):
    total: int
    students: int
    alumni: int
    admins: int


class AdminStatsResponse(CamelModel):
    experiences: ExperienceCounts
    reports: ReportCounts
    announcements: AnnouncementCounts
    users: UserCounts


class UserFilterOptions(CamelModel):
    branches: List[str] = []
    years: List[int] = []
    roles: List[str] = []


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
    success: bool = True


class HealthResponse(CamelModel):
    status: str = "ok"
    message: str = "Server is running"
