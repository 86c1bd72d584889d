"""
Company Standardization Store - canonical company names and their variations.

Document shape:
{
    "standard_name": "Tata Consultancy Services",
    "variations": ["TCS", "Tata Consultancy", "tcs ltd"],
    "created_by": 1,
    "created_at": datetime
}

Applying a standard name to an experience is a plain overwrite of its
`company` field (ExperienceStore.set_company); this table is never changed
by that.
"""

from datetime import datetime
from typing import Optional, List
from pymongo import ReturnDocument, ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from experience_portal.services.experience_service import serialize_doc, serialize_docs, to_object_id


class DuplicateStandardError(Exception):
    """A standardization already exists for this canonical name."""


def clean_variations(standard_name: str, variations: List[str]) -> List[str]:
    """Strip, drop blanks and duplicates (case-insensitive) and the standard name itself."""
    seen = {standard_name.strip().lower()}
    cleaned = []
    for variation in variations or []:
        value = (variation or "").strip()
        if value and value.lower() not in seen:
            seen.add(value.lower())
            cleaned.append(value)
    return cleaned


class StandardizationStore:

    def __init__(self, collection: Collection):
        self.collection = collection

    def list(self) -> List[dict]:
        return serialize_docs(self.collection.find({}).sort("standard_name", ASCENDING))

    def get(self, standardization_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"_id": to_object_id(standardization_id)}))

    def find_by_name(self, standard_name: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"standard_name": standard_name.strip()}))

    def create(self, standard_name: str, variations: List[str], created_by: int) -> dict:
        standard_name = standard_name.strip()
        if self.find_by_name(standard_name):
            raise DuplicateStandardError(standard_name)

        now = datetime.utcnow()
        doc = {
            "standard_name": standard_name,
            "variations": clean_variations(standard_name, variations),
            "created_by": created_by,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateStandardError(standard_name)
        return self.get(str(result.inserted_id))

    def update(self, standardization_id: str, standard_name: Optional[str] = None,
               variations: Optional[List[str]] = None) -> Optional[dict]:
        current = self.get(standardization_id)
        if not current:
            return None

        name = standard_name.strip() if standard_name else current["standard_name"]
        if name != current["standard_name"] and self.find_by_name(name):
            raise DuplicateStandardError(name)

        changes = {
            "standard_name": name,
            "variations": clean_variations(name, current["variations"] if variations is None else variations),
            "updated_at": datetime.utcnow(),
        }
        try:
            doc = self.collection.find_one_and_update(
                {"_id": to_object_id(standardization_id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateStandardError(name)
        return serialize_doc(doc)

    def delete(self, standardization_id: str) -> bool:
        return self.collection.delete_one({"_id": to_object_id(standardization_id)}).deleted_count > 0
