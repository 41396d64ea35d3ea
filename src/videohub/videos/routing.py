from typing import List

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.concurrency import run_in_threadpool

from videohub.auth.utils import get_backend, get_current_token
from videohub.backend import Backend
from .models import VideoView


router = APIRouter(tags=["videos"])


@router.post("/", response_model=VideoView, status_code=201)
async def upload_video(
    request: Request,
    title: str = Query(..., min_length=1, max_length=255),
    token: str = Depends(get_current_token),
    backend: Backend = Depends(get_backend),
):
    """
    Upload a video. The raw request body is the video content.
    """
    content = await request.body()
    video = await run_in_threadpool(backend.add_video, token, title, content)
    return VideoView.from_video(video)


@router.get("/search", response_model=List[VideoView])
def search_videos(
    q: List[str] = Query(default=[]),
    backend: Backend = Depends(get_backend),
):
    """
    Whole-word title search. A video matches if any of the terms matches.
    """
    return [VideoView.from_video(video) for video in backend.search_videos(q)]


@router.get("/{video_id}", response_model=VideoView)
def get_video(video_id: str, backend: Backend = Depends(get_backend)):
    return VideoView.from_video(backend.get_video(video_id))


@router.get("/{video_id}/download")
def download_video(video_id: str, backend: Backend = Depends(get_backend)):
    content = backend.download_video(video_id)
    return Response(content=content, media_type="application/octet-stream")
