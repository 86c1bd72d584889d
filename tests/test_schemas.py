import pytest
from pydantic import ValidationError

from experience_portal.schemas.schemas import (
    normalize_username, check_email_domain, RegisterRequest, ExperienceCreate, CommentCreate,
    ReportReview, StandardizationCreate
)

DOMAINS = ["marwadiuniversity.ac.in", "marwadiuniversity.edu.in"]


@pytest.mark.parametrize("raw, expected", [
    ("ab_12", "ab_12"),
    ("  Alice_01 ", "alice_01"),
    ("abc", "abc"),
    ("a" * 20, "a" * 20),
])
def test_valid_usernames(raw, expected):
    assert normalize_username(raw) == expected


def test_short_username_rejected():
    with pytest.raises(ValueError, match="between 3 and 20"):
        normalize_username("AB")


def test_long_username_rejected():
    with pytest.raises(ValueError, match="between 3 and 20"):
        normalize_username("a" * 21)


@pytest.mark.parametrize("raw", ["ab-12", "hello world", "name!"])
def test_username_characters(raw):
    with pytest.raises(ValueError, match="lowercase letters, numbers, and underscores"):
        normalize_username(raw)


@pytest.mark.parametrize("email", [
    "student@marwadiuniversity.ac.in",
    "first.last@marwadiuniversity.edu.in",
    "Mixed_Case-1@MarwadiUniversity.ac.in",
])
def test_allowed_email_domains(email):
    assert check_email_domain(email, DOMAINS) == email.lower()


@pytest.mark.parametrize("email", ["someone@gmail.com", "x@marwadiuniversity.ac.in.evil.com", "x@ac.in"])
def test_other_email_domains_rejected(email):
    with pytest.raises(ValueError, match="Email must be from @marwadiuniversity.ac.in or @marwadiuniversity.edu.in"):
        check_email_domain(email, DOMAINS)


def test_register_request_rejects_admin_role():
    with pytest.raises(ValidationError, match="Cannot register as admin"):
        RegisterRequest(
            name="Mallory", username="mallory", email="mallory@marwadiuniversity.ac.in",
            password="secret123", role="admin",
        )


def test_register_request_accepts_camel_case():
    request = RegisterRequest(**{
        "name": " Bob ", "username": "Bob_99", "email": "bob@marwadiuniversity.edu.in",
        "password": "secret123", "graduationYear": 2025, "isAlumni": True,
    })
    assert request.name == "Bob"
    assert request.username == "bob_99"
    assert request.graduation_year == 2025
    assert request.is_alumni is True


def _rounds(*numbers):
    return [{"roundNumber": n, "roundName": f"Round {n}", "questions": ["Q", "  "]} for n in numbers]


def test_experience_requires_increasing_round_numbers():
    base = {"company": "Google", "role": "SWE", "branch": "CE", "year": 2024}
    with pytest.raises(ValidationError, match="Round numbers must be unique and increasing"):
        ExperienceCreate(**base, rounds=_rounds(1, 1))
    with pytest.raises(ValidationError, match="Round numbers must be unique and increasing"):
        ExperienceCreate(**base, rounds=_rounds(2, 1))

    created = ExperienceCreate(**base, rounds=_rounds(1, 3))
    assert created.rounds[0].questions == ["Q"]
    assert created.rounds[0].difficulty == "Medium"
    assert created.offer_status == "Pending"


def test_experience_requires_at_least_one_round():
    with pytest.raises(ValidationError):
        ExperienceCreate(company="Google", role="SWE", branch="CE", year=2024, rounds=[])


def test_experience_blank_company_rejected():
    with pytest.raises(ValidationError, match="Company cannot be empty"):
        ExperienceCreate(company="   ", role="SWE", branch="CE", year=2024, rounds=_rounds(1))


def test_comment_limits():
    with pytest.raises(ValidationError):
        CommentCreate(content="x" * 1001)
    with pytest.raises(ValidationError, match="Comment cannot be empty"):
        CommentCreate(content="   ")
    assert CommentCreate(content="  nice  ").content == "nice"


def test_report_review_must_close_report():
    with pytest.raises(ValidationError, match="resolved or dismissed"):
        ReportReview(status="pending")
    assert ReportReview(status="dismissed", adminNotes="ok").admin_notes == "ok"


def test_standardization_name_required():
    with pytest.raises(ValidationError):
        StandardizationCreate(standard_name=" ")
