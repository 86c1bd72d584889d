"""
Comment Routes

DELETE /comments/{id} - Delete a comment (author or admin)
"""

from fastapi import APIRouter, HTTPException, Depends

from experience_portal.core.auth import get_current_user, is_owner_or_admin
from experience_portal.services.comment_service import CommentService, get_comment_service
from experience_portal.schemas.schemas import MessageResponse

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    user: dict = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
):
    comment = comments.get(comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if not is_owner_or_admin(user, comment["author_id"]):
        raise HTTPException(status_code=403, detail="Not authorized to delete this comment")

    comments.delete(comment_id)
    return MessageResponse(message="Comment deleted successfully")
