"""
Insight Routes - analytics over approved experiences.

GET /insights - Overview, frequent questions, distributions, package trends
GET /insights/questions - Question bank search
GET /insights/questions/export - Question bank as PDF
GET /companies - Per-company rollup
"""

from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response

from experience_portal.api.deps import get_experience_store
from experience_portal.services.experience_service import ExperienceStore
from experience_portal.services.insights_service import (
    compute_insights, company_rollup, flatten_questions, available_roles
)
from experience_portal.services.question_export import render_questions_pdf, export_filename
from experience_portal.schemas.schemas import InsightsResponse, QuestionSearchResponse, CompanySummary

router = APIRouter(tags=["Insights"])


@router.get("/insights", response_model=InsightsResponse)
async def get_insights(store: ExperienceStore = Depends(get_experience_store)):
    """Recomputed from the current approved experiences on every call."""
    return compute_insights(store.find())


@router.get("/insights/questions", response_model=QuestionSearchResponse)
async def search_questions(
    company: Optional[str] = None,
    role: Optional[str] = None,
    store: ExperienceStore = Depends(get_experience_store),
):
    experiences = store.find()
    questions = flatten_questions(experiences, company, role)
    return QuestionSearchResponse(
        questions=questions,
        available_roles=available_roles(experiences, company),
        total=len(questions),
    )


@router.get("/insights/questions/export")
async def export_questions(
    company: Optional[str] = None,
    role: Optional[str] = None,
    store: ExperienceStore = Depends(get_experience_store),
):
    """Download the matching questions as a PDF grouped by round."""
    questions = flatten_questions(store.find(), company, role)
    if not questions:
        raise HTTPException(status_code=404, detail="No questions found for the selected filters")

    pdf = render_questions_pdf(questions, company, role)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(company, role)}"'},
    )


@router.get("/companies", response_model=List[CompanySummary])
async def list_companies(store: ExperienceStore = Depends(get_experience_store)):
    return company_rollup(store.find())
