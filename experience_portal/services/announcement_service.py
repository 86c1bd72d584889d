"""
Announcement Service - notices published by admins.

Public readers only see active announcements that have not expired,
most urgent first. Expiry times are compared as naive UTC.
"""

from datetime import datetime, timezone
from typing import Optional, List
from sqlalchemy import text, bindparam, DateTime

from experience_portal.core.logging import get_logger
from experience_portal.db.postgres import get_db_session, execute_raw_sql

logger = get_logger(__name__)

ANNOUNCEMENT_COLUMNS = (
    "id, title, content, type, priority, published_at, expires_at, is_active, created_by, created_at"
)

PRIORITY_ORDER = """
    CASE priority
        WHEN 'urgent' THEN 0
        WHEN 'high' THEN 1
        WHEN 'medium' THEN 2
        ELSE 3
    END
"""

EDITABLE_FIELDS = ["title", "content", "type", "priority", "expires_at", "is_active"]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _with_timestamps(statement, *names):
    """Bind the named parameters as DateTime so every backend stores them the same way."""
    return statement.bindparams(*[bindparam(name, type_=DateTime) for name in names])


def _shape(row: dict) -> dict:
    row["is_active"] = bool(row["is_active"])
    return row


class AnnouncementService:

    def list_active(self, now: Optional[datetime] = None) -> List[dict]:
        statement = _with_timestamps(text(
            f"SELECT {ANNOUNCEMENT_COLUMNS} FROM announcements "
            "WHERE is_active = :active AND (expires_at IS NULL OR expires_at > :now) "
            f"ORDER BY {PRIORITY_ORDER}, published_at DESC, id DESC"
        ), "now")
        rows = execute_raw_sql(
            statement,
            {"active": True, "now": now or datetime.utcnow()}
        )
        return [_shape(row) for row in rows]

    def list_all(self) -> List[dict]:
        rows = execute_raw_sql(
            f"SELECT {ANNOUNCEMENT_COLUMNS} FROM announcements ORDER BY created_at DESC, id DESC"
        )
        return [_shape(row) for row in rows]

    def get(self, announcement_id: int) -> Optional[dict]:
        rows = execute_raw_sql(
            f"SELECT {ANNOUNCEMENT_COLUMNS} FROM announcements WHERE id = :id", {"id": announcement_id}
        )
        return _shape(rows[0]) if rows else None

    def create(self, data: dict, created_by: int) -> dict:
        with get_db_session() as db:
            result = db.execute(
                _with_timestamps(text("""
                    INSERT INTO announcements (title, content, type, priority, expires_at,
                                               is_active, created_by, published_at)
                    VALUES (:title, :content, :type, :priority, :expires_at,
                            :is_active, :created_by, :published_at)
                    RETURNING id
                """), "expires_at", "published_at"),
                {
                    "title": data["title"],
                    "content": data["content"],
                    "type": data.get("type") or "general",
                    "priority": data.get("priority") or "medium",
                    "expires_at": to_naive_utc(data.get("expires_at")),
                    "is_active": data.get("is_active", True),
                    "created_by": created_by,
                    "published_at": datetime.utcnow(),
                }
            )
            announcement_id = result.fetchone()[0]

        logger.info(f"Announcement {announcement_id} published by admin {created_by}")
        return self.get(announcement_id)

    def update(self, announcement_id: int, changes: dict) -> Optional[dict]:
        """Partial update; only keys present in `changes` are written."""
        params = {"id": announcement_id}
        updates = []
        for field in EDITABLE_FIELDS:
            if field in changes:
                value = changes[field]
                if field == "expires_at":
                    value = to_naive_utc(value)
                updates.append(f"{field} = :{field}")
                params[field] = value

        if not updates:
            return self.get(announcement_id)

        with get_db_session() as db:
            statement = text(f"UPDATE announcements SET {', '.join(updates)}, updated_at = CURRENT_TIMESTAMP "
                             "WHERE id = :id")
            if "expires_at" in params:
                statement = _with_timestamps(statement, "expires_at")
            result = db.execute(statement, params)
            if result.rowcount == 0:
                return None
        return self.get(announcement_id)

    def delete(self, announcement_id: int) -> bool:
        with get_db_session() as db:
            result = db.execute(text("DELETE FROM announcements WHERE id = :id"), {"id": announcement_id})
            return result.rowcount > 0

    def counts(self, now: Optional[datetime] = None) -> dict:
        total = execute_raw_sql("SELECT COUNT(*) AS n FROM announcements")[0]["n"]
        return {"total": total, "active": len(self.list_active(now))}


def get_announcement_service() -> AnnouncementService:
    return AnnouncementService()
