"""
Insights Service - analytics computed over experience documents.

Everything here is a pure function of the list it is given; routes fetch
the current approved experiences and call these on every request.
"""

import re
from collections import Counter
from typing import Dict, Iterable, List, Optional

PACKAGE_UNIT = re.compile(r"\s*LPA\s*$", re.IGNORECASE)
LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")

TOP_QUESTIONS = 10
TOP_PACKAGES = 10
DEFAULT_LEVEL = "Medium"


def parse_package(package: Optional[str]) -> Optional[float]:
    """
    "35 LPA" -> 35.0, "12.5LPA" -> 12.5, "8" -> 8.0.
    Returns None when no leading number can be read.
    """
    if not package or not isinstance(package, str):
        return None
    match = LEADING_NUMBER.match(PACKAGE_UNIT.sub("", package))
    if not match:
        return None
    return float(match.group(1))


def _distribution(values: Iterable) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for value in values:
        key = str(value)
        counts[key] = counts.get(key, 0) + 1
    return counts


def compute_insights(experiences: List[dict]) -> dict:
    """
    Build the /insights payload.

    Returns:
        {
            "overview": {total_experiences, unique_companies, unique_roles,
                         avg_package ("32.20"), max_package, min_package},
            "frequent_questions": [{question, count}] (top 10),
            "company_distribution": {company: count},
            "year_distribution": {year: count},
            "role_distribution": {role: count},
            "package_trends": [{value, company, role, year}] (top 10)
        }
    """
    packages = []
    question_counts: Counter = Counter()

    for exp in experiences:
        value = parse_package(exp.get("package"))
        if value is not None:
            packages.append({
                "value": value,
                "company": exp.get("company"),
                "role": exp.get("role"),
                "year": exp.get("year"),
            })
        for rnd in exp.get("rounds", []):
            for question in rnd.get("questions", []):
                key = question.strip().lower()
                if key:
                    question_counts[key] += 1

    values = [p["value"] for p in packages]
    avg_package = sum(values) / len(values) if values else 0.0

    # Counter keeps first-seen order and sorted() is stable, so ties stay in that order
    frequent = sorted(question_counts.items(), key=lambda item: item[1], reverse=True)[:TOP_QUESTIONS]

    return {
        "overview": {
            "total_experiences": len(experiences),
            "unique_companies": len({exp.get("company") for exp in experiences}),
            "unique_roles": len({exp.get("role") for exp in experiences}),
            "avg_package": f"{avg_package:.2f}",
            "max_package": max(values) if values else 0,
            "min_package": min(values) if values else 0,
        },
        "frequent_questions": [{"question": q, "count": c} for q, c in frequent],
        "company_distribution": _distribution(exp.get("company") for exp in experiences),
        "year_distribution": _distribution(exp.get("year") for exp in experiences),
        "role_distribution": _distribution(exp.get("role") for exp in experiences),
        "package_trends": sorted(packages, key=lambda p: p["value"], reverse=True)[:TOP_PACKAGES],
    }


def company_rollup(experiences: List[dict]) -> List[dict]:
    """Per-company summary for /companies, in first-seen company order."""
    companies: Dict[str, dict] = {}
    for exp in experiences:
        name = exp.get("company")
        entry = companies.setdefault(name, {
            "name": name,
            "total_experiences": 0,
            "roles": [],
            "branches": [],
            "years": [],
            "packages": [],
        })
        entry["total_experiences"] += 1
        for field, key in (("role", "roles"), ("branch", "branches"), ("year", "years")):
            value = exp.get(field)
            if value is not None and value not in entry[key]:
                entry[key].append(value)
        if exp.get("package"):
            entry["packages"].append(exp["package"])

    for entry in companies.values():
        entry["years"].sort(reverse=True)
    return list(companies.values())


# ============================================================
# QUESTION INDEX
# ============================================================

def _contains(field_value: Optional[str], needle: Optional[str]) -> bool:
    if not needle or not needle.strip():
        return True
    return needle.strip().lower() in (field_value or "").lower()


def flatten_questions(
    experiences: List[dict],
    company: Optional[str] = None,
    role: Optional[str] = None,
) -> List[dict]:
    """
    Every question of every round, tagged with where it came from.

    Order: experience order as given, then round order, then question order.
    `level` is the difficulty stored on the round.
    """
    entries = []
    for exp in experiences:
        if not (_contains(exp.get("company"), company) and _contains(exp.get("role"), role)):
            continue
        for rnd in exp.get("rounds", []):
            for question in rnd.get("questions", []):
                entries.append({
                    "question": question,
                    "company": exp.get("company"),
                    "role": exp.get("role"),
                    "round_number": rnd.get("round_number"),
                    "round_name": rnd.get("round_name"),
                    "year": exp.get("year"),
                    "level": rnd.get("difficulty") or DEFAULT_LEVEL,
                })
    return entries


def available_roles(experiences: List[dict], company: Optional[str] = None) -> List[str]:
    """Distinct roles among experiences matching the company filter."""
    return sorted({exp["role"] for exp in experiences
                   if exp.get("role") and _contains(exp.get("company"), company)})


def group_by_round(questions: List[dict]) -> List[dict]:
    """
    Group flattened questions by (round_number, round_name).

    Groups are sorted by round number; questions keep their order inside a group.
    """
    groups: Dict[tuple, dict] = {}
    for entry in questions:
        key = (entry["round_number"], entry["round_name"])
        if key not in groups:
            groups[key] = {
                "round_number": entry["round_number"],
                "round_name": entry["round_name"],
                "questions": [],
            }
        groups[key]["questions"].append(entry)
    return sorted(groups.values(), key=lambda g: g["round_number"])
