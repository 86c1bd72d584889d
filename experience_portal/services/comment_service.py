"""
Comment Service - discussion threads under experiences.
"""

from typing import Optional, List
from sqlalchemy import text

from experience_portal.core.logging import get_logger
from experience_portal.db.postgres import get_db_session, execute_raw_sql

logger = get_logger(__name__)

COMMENT_SELECT = """
    SELECT c.id, c.experience_id, c.author_id, c.content, c.created_at,
           u.name AS author_name, u.username AS author_username
    FROM comments c
    LEFT JOIN users u ON u.id = c.author_id
"""


class CommentService:

    def list_for_experience(self, experience_id: str) -> List[dict]:
        """Oldest first, so a thread reads top to bottom."""
        return execute_raw_sql(
            COMMENT_SELECT + " WHERE c.experience_id = :experience_id ORDER BY c.created_at ASC, c.id ASC",
            {"experience_id": experience_id}
        )

    def get(self, comment_id: int) -> Optional[dict]:
        rows = execute_raw_sql(COMMENT_SELECT + " WHERE c.id = :id", {"id": comment_id})
        return rows[0] if rows else None

    def create(self, experience_id: str, author_id: int, content: str) -> dict:
        with get_db_session() as db:
            result = db.execute(
                text("""
                    INSERT INTO comments (experience_id, author_id, content)
                    VALUES (:experience_id, :author_id, :content)
                    RETURNING id
                """),
                {"experience_id": experience_id, "author_id": author_id, "content": content}
            )
            comment_id = result.fetchone()[0]

        logger.info(f"Comment {comment_id} added to experience {experience_id} by user {author_id}")
        return self.get(comment_id)

    def delete(self, comment_id: int) -> bool:
        with get_db_session() as db:
            result = db.execute(text("DELETE FROM comments WHERE id = :id"), {"id": comment_id})
            return result.rowcount > 0

    def delete_for_experience(self, experience_id: str) -> int:
        with get_db_session() as db:
            result = db.execute(
                text("DELETE FROM comments WHERE experience_id = :experience_id"),
                {"experience_id": experience_id}
            )
            return result.rowcount


def get_comment_service() -> CommentService:
    return CommentService()
