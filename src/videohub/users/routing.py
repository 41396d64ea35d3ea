from typing import List

from fastapi import APIRouter, Depends, Query

from videohub.auth.utils import get_backend
from videohub.backend import Backend
from videohub.videos.models import VideoView

router = APIRouter(tags=["users"])


@router.get("/search", response_model=List[str])
def search_users(q: List[str] = Query(default=[]), backend: Backend = Depends(get_backend)):
    """
    Whole-word search over user names, in registration order.
    """
    return backend.search_users(q)


@router.get("/{user_name}/videos", response_model=List[VideoView])
def list_user_videos(user_name: str, backend: Backend = Depends(get_backend)):
    return [VideoView.from_video(video) for video in backend.user_videos(user_name)]
