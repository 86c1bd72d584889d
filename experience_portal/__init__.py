"""
Placement Experience Portal
Students and alumni share interview experiences; admins moderate them.

Architecture:
- PostgreSQL: Relational records (users, comments, reports, announcements)
- MongoDB: Experience documents with embedded rounds, company standardizations
"""

__version__ = "1.0.0"
