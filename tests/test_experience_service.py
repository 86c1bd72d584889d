from datetime import date, datetime

import mongomock
import pytest

from experience_portal.services.experience_service import (
    ExperienceStore, InvalidIdError, renumber_rounds, remove_round, APPROVED, REJECTED, PENDING
)
from experience_portal.services.standardization_service import (
    StandardizationStore, DuplicateStandardError, clean_variations
)


@pytest.fixture
def store():
    return ExperienceStore(mongomock.MongoClient()["portal"]["experiences"])


def _data(**overrides):
    data = {
        "company": "Google",
        "role": "Software Engineer",
        "branch": "Computer Science",
        "year": 2024,
        "rounds": [
            {"round_number": 1, "round_name": "OA", "questions": ["Two sum"], "feedback": "easy"},
            {"round_number": 3, "round_name": "Tech", "questions": ["LRU cache"], "feedback": "fun"},
        ],
        "package": "35 LPA",
        "tips": "Practice graphs",
        "interview_date": date(2024, 1, 15),
        "offer_status": "Selected",
    }
    data.update(overrides)
    return data


def test_renumber_rounds_keeps_order():
    rounds = [{"round_number": 4, "round_name": "a"}, {"round_number": 9, "round_name": "b"}]
    assert [(r["round_number"], r["round_name"]) for r in renumber_rounds(rounds)] == [(1, "a"), (2, "b")]


def test_remove_round_renumbers_remaining():
    rounds = renumber_rounds([{"round_name": n} for n in ("OA", "Tech", "HR")])

    remaining = remove_round(rounds, 2)

    assert [(r["round_number"], r["round_name"]) for r in remaining] == [(1, "OA"), (2, "HR")]


def test_remove_missing_round_raises():
    with pytest.raises(KeyError):
        remove_round(renumber_rounds([{"round_name": "OA"}]), 5)


def test_create_starts_pending_with_zero_views(store):
    created = store.create(_data(), author_id=7, author_name="Alice")

    assert created["moderation_status"] == PENDING
    assert created["views"] == 0
    assert created["author_id"] == 7
    assert [r["round_number"] for r in created["rounds"]] == [1, 2]
    assert created["interview_date"] == datetime(2024, 1, 15)
    assert "_id" not in created


def test_find_defaults_to_approved(store):
    pending = store.create(_data(), 1, "A")
    approved = store.create(_data(company="Amazon"), 1, "A")
    store.set_moderation(approved["id"], APPROVED, None, admin_id=99)

    assert [e["id"] for e in store.find()] == [approved["id"]]
    assert [e["id"] for e in store.find(status=PENDING)] == [pending["id"]]
    assert len(store.find(status=None)) == 2


def test_missing_moderation_status_counts_as_pending(store):
    store.collection.insert_one({"company": "Legacy", "role": "SWE", "branch": "CE", "year": 2020,
                                 "rounds": [], "created_at": datetime(2020, 1, 1)})

    assert len(store.find(status=PENDING)) == 1
    assert store.find(status=PENDING)[0]["moderation_status"] == PENDING
    assert store.count_by_status() == {"pending": 1, "approved": 0, "rejected": 0, "total": 1}


def test_find_filters(store):
    for company, role, branch, year in [
        ("Google", "Software Engineer", "CE", 2024),
        ("Google India", "Data Scientist", "IT", 2023),
        ("C++ Labs", "Systems Engineer", "CE", 2024),
    ]:
        exp = store.create(_data(company=company, role=role, branch=branch, year=year), 1, "A")
        store.set_moderation(exp["id"], APPROVED, None, 1)

    assert len(store.find(company="google")) == 2
    assert len(store.find(company="google", year=2023)) == 1
    assert len(store.find(role="ENGINEER")) == 2
    assert len(store.find(branch="ce")) == 2
    assert [e["company"] for e in store.find(company="C++")] == ["C++ Labs"]
    assert len(store.find(search="lru")) == 3
    assert len(store.find(search="data sci")) == 1
    assert store.find(search="no such thing") == []


def test_find_is_newest_first(store):
    first = store.create(_data(company="First"), 1, "A")
    second = store.create(_data(company="Second"), 1, "A")
    store.collection.update_one({"company": "First"}, {"$set": {"created_at": datetime(2020, 1, 1)}})
    for exp in (first, second):
        store.set_moderation(exp["id"], APPROVED, None, 1)

    assert [e["company"] for e in store.find()] == ["Second", "First"]


def test_increment_views(store):
    exp = store.create(_data(), 1, "A")
    store.increment_views(exp["id"])
    assert store.increment_views(exp["id"])["views"] == 2


def test_invalid_id(store):
    with pytest.raises(InvalidIdError):
        store.get("not-an-id")


def test_moderation_overwrites_notes(store):
    exp = store.create(_data(), 1, "A")

    store.set_moderation(exp["id"], APPROVED, "looks good", admin_id=5)
    rejected = store.set_moderation(exp["id"], REJECTED, "duplicate", admin_id=6)

    assert rejected["moderation_status"] == REJECTED
    assert rejected["moderation_notes"] == "duplicate"
    assert rejected["moderated_by"] == 6


def test_update_ignores_none_and_renumbers(store):
    exp = store.create(_data(), 1, "A")

    updated = store.update(exp["id"], {"tips": "New tips", "package": None,
                                       "rounds": [{"round_number": 7, "round_name": "Only"}]})

    assert updated["tips"] == "New tips"
    assert updated["package"] == "35 LPA"
    assert updated["rounds"] == [{"round_number": 1, "round_name": "Only"}]


def test_filter_options_and_company_counts(store):
    a = store.create(_data(company="Google", year=2023), 1, "A")
    store.create(_data(company="Amazon", year=2024), 1, "A")
    store.set_moderation(a["id"], APPROVED, None, 1)

    options = store.filter_options()
    assert options["companies"] == ["Google"]
    assert options["years"] == [2023]
    assert store.company_counts() == [{"name": "Amazon", "count": 1}, {"name": "Google", "count": 1}]


def test_clean_variations():
    assert clean_variations("TCS", [" tcs ", "Tata", "tata", "", "Tata Consultancy"]) == ["Tata", "Tata Consultancy"]


def test_standardization_store_rejects_duplicates():
    standards = StandardizationStore(mongomock.MongoClient()["portal"]["company_standardizations"])
    created = standards.create("Google", ["google inc", "GOOGLE"], created_by=1)

    assert created["variations"] == ["google inc"]
    with pytest.raises(DuplicateStandardError):
        standards.create(" Google ", [], created_by=1)

    other = standards.create("Amazon", [], created_by=1)
    with pytest.raises(DuplicateStandardError):
        standards.update(other["id"], standard_name="Google")

    renamed = standards.update(created["id"], standard_name="Alphabet", variations=["Google"])
    assert renamed["standard_name"] == "Alphabet"
    assert renamed["variations"] == ["Google"]
    assert [s["standard_name"] for s in standards.list()] == ["Alphabet", "Amazon"]
    assert standards.delete(created["id"]) is True
    assert standards.get(created["id"]) is None
