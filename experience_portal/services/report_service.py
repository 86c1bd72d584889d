"""
Report Service - user reports against experiences and their admin review.

A report starts as `pending`; an admin closes it as `resolved` or
`dismissed`, optionally with notes. Reviewing never touches the experience
itself; removing content is a separate admin action.
"""

from typing import Optional, List
from sqlalchemy import text

from experience_portal.core.logging import get_logger
from experience_portal.db.postgres import get_db_session, execute_raw_sql

logger = get_logger(__name__)

REPORT_SELECT = """
    SELECT r.id, r.experience_id, r.reported_by, r.reason, r.description, r.status,
           r.admin_notes, r.reviewed_by, r.reviewed_at, r.created_at,
           u.name AS reporter_name
    FROM reports r
    LEFT JOIN users u ON u.id = r.reported_by
"""


class ReportService:

    def create(self, experience_id: str, reported_by: int, reason: str,
               description: Optional[str] = None) -> dict:
        with get_db_session() as db:
            result = db.execute(
                text("""
                    INSERT INTO reports (experience_id, reported_by, reason, description, status)
                    VALUES (:experience_id, :reported_by, :reason, :description, 'pending')
                    RETURNING id
                """),
                {
                    "experience_id": experience_id,
                    "reported_by": reported_by,
                    "reason": reason,
                    "description": description,
                }
            )
            report_id = result.fetchone()[0]

        logger.info(f"Report {report_id} filed on experience {experience_id} ({reason})")
        return self.get(report_id)

    def has_open_report(self, experience_id: str, reported_by: int) -> bool:
        rows = execute_raw_sql(
            "SELECT id FROM reports WHERE experience_id = :experience_id "
            "AND reported_by = :reported_by AND status = 'pending'",
            {"experience_id": experience_id, "reported_by": reported_by}
        )
        return bool(rows)

    def get(self, report_id: int) -> Optional[dict]:
        rows = execute_raw_sql(REPORT_SELECT + " WHERE r.id = :id", {"id": report_id})
        return rows[0] if rows else None

    def list(self, status: Optional[str] = None) -> List[dict]:
        sql = REPORT_SELECT
        params = {}
        if status:
            sql += " WHERE r.status = :status"
            params["status"] = status
        sql += " ORDER BY r.created_at DESC, r.id DESC"
        return execute_raw_sql(sql, params)

    def review(self, report_id: int, status: str, admin_id: int,
               admin_notes: Optional[str] = None) -> Optional[dict]:
        with get_db_session() as db:
            result = db.execute(
                text("""
                    UPDATE reports
                    SET status = :status, admin_notes = :admin_notes,
                        reviewed_by = :admin_id, reviewed_at = CURRENT_TIMESTAMP
                    WHERE id = :id
                """),
                {
                    "id": report_id,
                    "status": status,
                    "admin_notes": admin_notes,
                    "admin_id": admin_id,
                }
            )
            if result.rowcount == 0:
                return None

        logger.info(f"Report {report_id} marked {status} by admin {admin_id}")
        return self.get(report_id)

    def delete_for_experience(self, experience_id: str) -> int:
        with get_db_session() as db:
            result = db.execute(
                text("DELETE FROM reports WHERE experience_id = :experience_id"),
                {"experience_id": experience_id}
            )
            return result.rowcount

    def counts(self) -> dict:
        rows = execute_raw_sql("SELECT status, COUNT(*) AS n FROM reports GROUP BY status")
        by_status = {r["status"]: r["n"] for r in rows}
        return {"total": sum(by_status.values()), "pending": by_status.get("pending", 0)}


def get_report_service() -> ReportService:
    return ReportService()
