"""
User Service - accounts in the `users` table.

Uniqueness of username and email is enforced by the table's unique
constraints; a violating insert surfaces as DuplicateUserError so two
racing registrations end with exactly one account.
"""

from typing import Optional, List
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from experience_portal.core.logging import get_logger
from experience_portal.core.security import hash_password
from experience_portal.db.postgres import get_db_session, execute_raw_sql

logger = get_logger(__name__)

USER_COLUMNS = (
    "id, name, username, email, role, branch, graduation_year, current_company, "
    "bio, linkedin, github, twitter, is_alumni, created_at"
)

DUPLICATE_MESSAGES = {
    "username": "This username is already taken",
    "email": "User already exists with this email",
}


class DuplicateUserError(Exception):
    """Username or email already registered."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(DUPLICATE_MESSAGES.get(field, f"{field} already exists"))


def _duplicate_field(error: IntegrityError) -> str:
    message = str(error.orig).lower()
    for field in ("username", "email"):
        if field in message:
            return field
    return "account"


def to_user(row: Optional[dict]) -> Optional[dict]:
    """Shape a users row for the API (links grouped under `profile`)."""
    if row is None:
        return None
    user = dict(row)
    user.pop("password_hash", None)
    user["is_alumni"] = bool(user.get("is_alumni"))
    user["profile"] = {key: user.pop(key, None) for key in ("bio", "linkedin", "github", "twitter")}
    return user


class UserService:

    def create_user(
        self,
        name: str,
        username: str,
        email: str,
        password: str,
        role: str = "student",
        branch: Optional[str] = None,
        graduation_year: Optional[int] = None,
        is_alumni: bool = False,
    ) -> dict:
        """
        Insert a user. The password is hashed here.

        Raises:
            DuplicateUserError: username or email taken (unique constraint)
        """
        try:
            with get_db_session() as db:
                result = db.execute(
                    text("""
                        INSERT INTO users (name, username, email, password_hash, role, branch,
                                           graduation_year, is_alumni)
                        VALUES (:name, :username, :email, :password_hash, :role, :branch,
                                :graduation_year, :is_alumni)
                        RETURNING id
                    """),
                    {
                        "name": name,
                        "username": username.lower(),
                        "email": email.lower(),
                        "password_hash": hash_password(password),
                        "role": role,
                        "branch": branch,
                        "graduation_year": graduation_year,
                        "is_alumni": is_alumni,
                    }
                )
                user_id = result.fetchone()[0]
        except IntegrityError as e:
            field = _duplicate_field(e)
            logger.info(f"Registration rejected, duplicate {field}: {username}")
            raise DuplicateUserError(field)

        logger.info(f"User {user_id} created ({username}, role={role})")
        return self.get_by_id(user_id)

    def get_by_id(self, user_id: int) -> Optional[dict]:
        rows = execute_raw_sql(f"SELECT {USER_COLUMNS} FROM users WHERE id = :id", {"id": user_id})
        return to_user(rows[0]) if rows else None

    def get_by_username(self, username: str) -> Optional[dict]:
        rows = execute_raw_sql(
            f"SELECT {USER_COLUMNS} FROM users WHERE username = :username",
            {"username": username.strip().lower()}
        )
        return to_user(rows[0]) if rows else None

    def get_credentials(self, identifier: str) -> Optional[dict]:
        """Row with password_hash for login; identifier is an email or a username."""
        rows = execute_raw_sql(
            f"SELECT {USER_COLUMNS}, password_hash FROM users "
            "WHERE email = :identifier OR username = :identifier",
            {"identifier": identifier.strip().lower()}
        )
        return rows[0] if rows else None

    def exists(self, username: str = None, email: str = None) -> Optional[str]:
        """Return which field ('email' or 'username') is already registered, if any."""
        if email and execute_raw_sql("SELECT id FROM users WHERE email = :email", {"email": email.lower()}):
            return "email"
        if username and execute_raw_sql("SELECT id FROM users WHERE username = :u", {"u": username.lower()}):
            return "username"
        return None

    def update_profile(self, user_id: int, changes: dict) -> Optional[dict]:
        """
        Update profile fields. Only provided (non-None) fields are written.
        A `password` entry is re-hashed before it is stored.
        """
        params = {"id": user_id}
        updates = []

        profile = changes.pop("profile", None) or {}
        for field in ["name", "branch", "graduation_year", "current_company", "is_alumni"]:
            value = changes.get(field)
            if value is not None:
                updates.append(f"{field} = :{field}")
                params[field] = value
        for field in ["bio", "linkedin", "github", "twitter"]:
            if field in profile:
                updates.append(f"{field} = :{field}")
                params[field] = profile[field]
        if changes.get("password"):
            updates.append("password_hash = :password_hash")
            params["password_hash"] = hash_password(changes["password"])

        if updates:
            with get_db_session() as db:
                db.execute(
                    text(f"UPDATE users SET {', '.join(updates)}, updated_at = CURRENT_TIMESTAMP WHERE id = :id"),
                    params
                )
        return self.get_by_id(user_id)

    def set_role(self, user_id: int, role: str):
        with get_db_session() as db:
            db.execute(
                text("UPDATE users SET role = :role, updated_at = CURRENT_TIMESTAMP WHERE id = :id"),
                {"id": user_id, "role": role}
            )

    def list_users(
        self,
        branch: Optional[str] = None,
        graduation_year: Optional[int] = None,
        role: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[dict]:
        """Admin listing with optional filters, newest first."""
        sql = f"SELECT {USER_COLUMNS} FROM users WHERE 1 = 1"
        params = {}

        if branch:
            sql += " AND branch = :branch"
            params["branch"] = branch
        if graduation_year:
            sql += " AND graduation_year = :graduation_year"
            params["graduation_year"] = graduation_year
        if role:
            sql += " AND role = :role"
            params["role"] = role
        if search:
            sql += (" AND (LOWER(name) LIKE :search OR LOWER(username) LIKE :search"
                    " OR LOWER(email) LIKE :search)")
            params["search"] = f"%{search.strip().lower()}%"

        sql += " ORDER BY created_at DESC, id DESC"
        return [to_user(row) for row in execute_raw_sql(sql, params)]

    def filter_options(self) -> dict:
        branches = execute_raw_sql(
            "SELECT DISTINCT branch FROM users WHERE branch IS NOT NULL AND branch <> '' ORDER BY branch"
        )
        years = execute_raw_sql(
            "SELECT DISTINCT graduation_year FROM users WHERE graduation_year IS NOT NULL "
            "ORDER BY graduation_year DESC"
        )
        roles = execute_raw_sql("SELECT DISTINCT role FROM users ORDER BY role")
        return {
            "branches": [r["branch"] for r in branches],
            "years": [r["graduation_year"] for r in years],
            "roles": [r["role"] for r in roles],
        }

    def count_by_role(self) -> dict:
        rows = execute_raw_sql("SELECT role, COUNT(*) AS n FROM users GROUP BY role")
        counts = {r["role"]: r["n"] for r in rows}
        return {
            "total": sum(counts.values()),
            "students": counts.get("student", 0),
            "alumni": counts.get("alumni", 0),
            "admins": counts.get("admin", 0),
        }


def provision_admin(name: str, username: str, email: str, password: str) -> dict:
    """
    Create an admin account, or promote the existing account that owns the
    username or email. Run from scripts/create_admin.py, never from a request.
    """
    service = UserService()
    rows = execute_raw_sql(
        "SELECT id FROM users WHERE username = :username OR email = :email",
        {"username": username.lower(), "email": email.lower()}
    )
    if rows:
        user_id = rows[0]["id"]
        service.set_role(user_id, "admin")
        service.update_profile(user_id, {"password": password})
        logger.info(f"User {user_id} promoted to admin")
        return service.get_by_id(user_id)

    return service.create_user(name=name, username=username, email=email, password=password, role="admin")


def get_user_service() -> UserService:
    """Get user service instance."""
    return UserService()
