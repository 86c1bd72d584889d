"""
Shared route dependencies - document stores bound to the request's database.
"""

from fastapi import Depends, HTTPException
from pymongo.database import Database

from experience_portal.db.mongodb import get_mongo_db, get_collection
from experience_portal.services.experience_service import ExperienceStore, InvalidIdError
from experience_portal.services.standardization_service import StandardizationStore


def get_experience_store(db: Database = Depends(get_mongo_db)) -> ExperienceStore:
    return ExperienceStore(get_collection("experiences", db))


def get_standardization_store(db: Database = Depends(get_mongo_db)) -> StandardizationStore:
    return StandardizationStore(get_collection("company_standardizations", db))


def load_experience(store: ExperienceStore, experience_id: str) -> dict:
    """Fetch an experience or raise 400 (malformed id) / 404 (missing)."""
    try:
        experience = store.get(experience_id)
    except InvalidIdError:
        raise HTTPException(status_code=400, detail="Invalid experience ID format")
    if not experience:
        raise HTTPException(status_code=404, detail="Experience not found")
    return experience
