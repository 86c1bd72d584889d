"""
Announcement Routes

GET /announcements - Active, unexpired announcements (most urgent first)
"""

from typing import List
from fastapi import APIRouter, Depends

from experience_portal.services.announcement_service import AnnouncementService, get_announcement_service
from experience_portal.schemas.schemas import AnnouncementResponse

router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(announcements: AnnouncementService = Depends(get_announcement_service)):
    return announcements.list_active()
