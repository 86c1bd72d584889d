"""
Experience Store - CRUD and moderation over the `experiences` collection.

Each document is one interview report with its rounds embedded:
{
    "company": "Google", "role": "Software Engineer", "branch": "CE", "year": 2024,
    "rounds": [{"round_number": 1, "round_name": "OA", "questions": [...],
                "feedback": "...", "difficulty": "Medium"}],
    "package": "35 LPA", "tips": "...", "interview_date": datetime,
    "offer_status": "Selected", "moderation_status": "pending",
    "views": 0, "author_id": 7, "author_name": "Alice", "created_at": datetime
}

The collection is passed in by the caller (see api/deps.py), so the store
holds no global state and tests can hand it a mongomock collection.
"""

import re
from datetime import datetime, date, time
from typing import Optional, List, Dict, Any
from bson import ObjectId
from pymongo import ReturnDocument, DESCENDING
from pymongo.collection import Collection

from experience_portal.core.logging import get_logger

logger = get_logger(__name__)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
MODERATION_STATUSES = (PENDING, APPROVED, REJECTED)


class InvalidIdError(ValueError):
    """Raised when a path id is not a valid ObjectId."""


# ============================================================
# HELPERS
# ============================================================

def to_object_id(value: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise InvalidIdError(value)
    return ObjectId(value)


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to a JSON-ready dict with `id` instead of `_id`."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> List[dict]:
    return [serialize_doc(doc) for doc in docs]


def serialize_experience(doc: dict) -> Optional[dict]:
    doc = serialize_doc(doc)
    if doc is not None:
        doc.setdefault("moderation_status", PENDING)
    return doc


def status_query(status: Optional[str]) -> dict:
    """Mongo filter for a moderation status. A missing status counts as pending."""
    if not status:
        return {}
    if status == PENDING:
        return {"$or": [{"moderation_status": PENDING}, {"moderation_status": {"$exists": False}}]}
    return {"moderation_status": status}


def _as_datetime(value) -> Optional[datetime]:
    # BSON has no plain date type
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    return value


def matches_search(doc: dict, search: str) -> bool:
    """Case-insensitive substring match across the text fields of an experience."""
    needle = search.lower()

    def has(value) -> bool:
        return bool(value) and needle in str(value).lower()

    if any(has(doc.get(field)) for field in ("company", "role", "branch", "tips")):
        return True
    for rnd in doc.get("rounds", []):
        if has(rnd.get("feedback")) or any(has(q) for q in rnd.get("questions", [])):
            return True
    return False


# ============================================================
# ROUND NUMBERING
# ============================================================

def renumber_rounds(rounds: List[dict]) -> List[dict]:
    """Return rounds in their current order, numbered 1..n."""
    return [{**rnd, "round_number": i} for i, rnd in enumerate(rounds, start=1)]


def remove_round(rounds: List[dict], round_number: int) -> List[dict]:
    """Drop the round with the given number and close the gap in numbering."""
    remaining = [r for r in rounds if r.get("round_number") != round_number]
    if len(remaining) == len(rounds):
        raise KeyError(round_number)
    return renumber_rounds(remaining)


# ============================================================
# EXPERIENCE STORE
# ============================================================

class ExperienceStore:
    """
    Handles experience documents.
    All reads return serialized dicts (see serialize_experience).
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    # ---------- reads ----------

    def find(
        self,
        company: Optional[str] = None,
        role: Optional[str] = None,
        branch: Optional[str] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
        status: Optional[str] = APPROVED,
        author_id: Optional[int] = None,
    ) -> List[dict]:
        """
        List experiences, newest first.

        Args:
            company/role/branch: case-insensitive partial match
            year: exact match
            search: substring over company, role, branch, tips, questions, feedback
            status: moderation status filter (None = every status)
            author_id: only this author's submissions
        """
        query: Dict[str, Any] = dict(status_query(status))
        for field, value in (("company", company), ("role", role), ("branch", branch)):
            if value and value.strip():
                query[field] = {"$regex": re.escape(value.strip()), "$options": "i"}
        if year is not None:
            query["year"] = year
        if author_id is not None:
            query["author_id"] = author_id

        docs = self.collection.find(query).sort("created_at", DESCENDING)
        results = [serialize_experience(doc) for doc in docs]

        if search and search.strip():
            results = [doc for doc in results if matches_search(doc, search.strip())]
        return results

    def get(self, experience_id: str) -> Optional[dict]:
        doc = self.collection.find_one({"_id": to_object_id(experience_id)})
        return serialize_experience(doc)

    def increment_views(self, experience_id: str) -> Optional[dict]:
        """Atomically add one view and return the updated document."""
        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(experience_id)},
            {"$inc": {"views": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_experience(doc)

    def count_by_status(self) -> Dict[str, int]:
        counts = {status: self.collection.count_documents(status_query(status))
                  for status in MODERATION_STATUSES}
        counts["total"] = self.collection.count_documents({})
        return counts

    def filter_options(self) -> Dict[str, List]:
        """Distinct companies/roles/branches/years over approved experiences."""
        docs = self.find(status=APPROVED)
        return {
            "companies": sorted({d["company"] for d in docs if d.get("company")}),
            "roles": sorted({d["role"] for d in docs if d.get("role")}),
            "branches": sorted({d["branch"] for d in docs if d.get("branch")}),
            "years": sorted({d["year"] for d in docs if d.get("year") is not None}, reverse=True),
        }

    def company_counts(self) -> List[dict]:
        """Every company name in use (any status) with its experience count."""
        counts: Dict[str, int] = {}
        for doc in self.collection.find({}, {"company": 1}):
            name = doc.get("company")
            if name:
                counts[name] = counts.get(name, 0) + 1
        return [{"name": name, "count": count} for name, count in sorted(counts.items())]

    # ---------- writes ----------

    def create(self, data: dict, author_id: Optional[int], author_name: str) -> dict:
        """
        Insert a new experience in `pending` moderation state.

        Args:
            data: validated ExperienceCreate fields (snake_case)
            author_id: user id, or None for anonymous posts
            author_name: display name stored with the post
        """
        now = datetime.utcnow()
        doc = {
            "company": data["company"],
            "role": data["role"],
            "branch": data["branch"],
            "year": data["year"],
            "rounds": renumber_rounds(data["rounds"]),
            "package": data.get("package"),
            "tips": data.get("tips") or "",
            "interview_date": _as_datetime(data.get("interview_date")) or now,
            "offer_status": data.get("offer_status") or "Pending",
            "moderation_status": PENDING,
            "moderation_notes": None,
            "views": 0,
            "author_id": author_id,
            "author_name": author_name,
            "created_at": now,
            "updated_at": now,
        }
        result = self.collection.insert_one(doc)
        logger.info(f"Experience {result.inserted_id} created for {doc['company']} / {doc['role']}")
        return self.get(str(result.inserted_id))

    def update(self, experience_id: str, changes: dict) -> Optional[dict]:
        """Apply a partial update. Returns the updated document or None."""
        changes = {k: v for k, v in changes.items() if v is not None}
        if "rounds" in changes:
            changes["rounds"] = renumber_rounds(changes["rounds"])
        if "interview_date" in changes:
            changes["interview_date"] = _as_datetime(changes["interview_date"])
        changes["updated_at"] = datetime.utcnow()

        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(experience_id)},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_experience(doc)

    def replace_rounds(self, experience_id: str, rounds: List[dict]) -> Optional[dict]:
        return self.update(experience_id, {"rounds": rounds})

    def set_moderation(self, experience_id: str, status: str, notes: Optional[str], admin_id: int) -> Optional[dict]:
        """Write a moderation decision. Overwrites any earlier notes."""
        if status not in MODERATION_STATUSES:
            raise ValueError(f"Unknown moderation status: {status}")
        now = datetime.utcnow()
        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(experience_id)},
            {"$set": {
                "moderation_status": status,
                "moderation_notes": notes,
                "moderated_by": admin_id,
                "moderated_at": now,
                "updated_at": now,
            }},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_experience(doc)

    def set_company(self, experience_id: str, company: str) -> Optional[dict]:
        return self.update(experience_id, {"company": company})

    def delete(self, experience_id: str) -> bool:
        result = self.collection.delete_one({"_id": to_object_id(experience_id)})
        return result.deleted_count > 0
