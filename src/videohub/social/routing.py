import asyncio
import contextlib
import logging
from typing import List

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool

from videohub.auth.utils import get_backend, get_current_token
from videohub.backend import Backend
from videohub.errors import NotAuthorized
from videohub.videos.models import NotificationView
from .models import CommentCreate

# Set up logging
logger = logging.getLogger("social")

router = APIRouter(tags=["social"])


# Comments
@router.post("/videos/{video_id}/comments", status_code=201)
def create_comment(
    video_id: str,
    comment: CommentCreate,
    token: str = Depends(get_current_token),
    backend: Backend = Depends(get_backend),
):
    """
    Comment on a video, or reply to the top-level comment at ``reply_to``.
    """
    backend.leave_comment(token, video_id, comment.content, comment.reply_to)
    return {"message": "Comment created successfully", "video_id": video_id}


# Likes
@router.post("/videos/{video_id}/like")
def like_video(
    video_id: str,
    token: str = Depends(get_current_token),
    backend: Backend = Depends(get_backend),
):
    """
    Like a video. If already liked, this is a no-op.
    """
    backend.leave_like(token, video_id)
    return {"message": "Video liked", "likes": backend.get_video(video_id).like_count}


@router.post("/videos/{video_id}/comments/{comment_index}/like")
def like_comment(
    video_id: str,
    comment_index: int,
    token: str = Depends(get_current_token),
    backend: Backend = Depends(get_backend),
):
    backend.leave_like(token, video_id, comment_index)
    return {"message": "Comment liked"}


# Subscriptions
@router.post("/subscriptions/{user_name}")
def subscribe(
    user_name: str,
    token: str = Depends(get_current_token),
    backend: Backend = Depends(get_backend),
):
    backend.subscribe_for(token, user_name)
    return {"message": f"Subscribed for {user_name}"}


# Notifications
@router.get("/notifications", response_model=List[NotificationView])
def list_notifications(
    token: str = Depends(get_current_token),
    backend: Backend = Depends(get_backend),
):
    """
    Pending notifications. They stay until released with DELETE, even if
    they were already pushed over the live channel.
    """
    return [NotificationView.from_notification(n) for n in backend.pending_notifications(token)]


@router.delete("/notifications")
def release_notifications(
    token: str = Depends(get_current_token),
    backend: Backend = Depends(get_backend),
):
    backend.release_pending_notifications(token)
    return {"message": "Pending notifications released"}


@router.websocket("/notifications/ws")
async def notifications_ws(websocket: WebSocket, token: str):
    """
    Live notification channel. Pending notifications are replayed right
    after connecting; new uploads of followed users are pushed as they happen.
    """
    backend: Backend = websocket.app.state.backend
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def push(notification):
        payload = NotificationView.from_notification(notification).model_dump()
        loop.call_soon_threadsafe(queue.put_nowait, payload)

    try:
        registration = await run_in_threadpool(backend.set_client_callback, token, push)
    except NotAuthorized:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()

    async def pump():
        while True:
            await websocket.send_json(await queue.get())

    sender = asyncio.create_task(pump())
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"Notification channel for {registration.user_name} disconnected")
    finally:
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await sender
        await run_in_threadpool(registration.cancel)
