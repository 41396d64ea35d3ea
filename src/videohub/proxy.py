"""Round-robin dispatch over several backends.

The proxy holds no data. Every backend behind it must share one
ServiceContext, otherwise users, tokens and videos end up partitioned
between replicas; nothing here checks that.
"""
import threading
from typing import List, Optional, Sequence

from videohub.backend import Backend
from videohub.db.models import Notification, Video
from videohub.notifications.hub import CallbackRegistration, ClientCallback


class DispatchProxy(Backend):
    def __init__(self, backends: Sequence[Backend]):
        if not backends:
            raise ValueError("DispatchProxy needs at least one backend")
        self.backends: List[Backend] = list(backends)
        self.round_robin_index = 0
        self._lock = threading.Lock()

    def next_backend(self) -> Backend:
        # The cursor is advanced before use: a fresh proxy sends its first
        # call to backends[1 % N].
        with self._lock:
            self.round_robin_index += 1
            return self.backends[self.round_robin_index % len(self.backends)]

    def auth(self, name: str, password: str) -> str:
        return self.next_backend().auth(name, password)

    def register_user(self, name: str, password: str) -> None:
        self.next_backend().register_user(name, password)

    def add_video(self, token: str, title: str, content: bytes) -> Video:
        return self.next_backend().add_video(token, title, content)

    def search_videos(self, request: Sequence[str]) -> List[Video]:
        return self.next_backend().search_videos(request)

    def get_video(self, video_id: str) -> Video:
        return self.next_backend().get_video(video_id)

    def download_video(self, video_id: str) -> bytes:
        return self.next_backend().download_video(video_id)

    def leave_comment(self, token: str, video_id: str, text: str, reply_to: Optional[int] = None) -> None:
        self.next_backend().leave_comment(token, video_id, text, reply_to)

    def leave_like(self, token: str, video_id: str, comment_index: Optional[int] = None) -> None:
        self.next_backend().leave_like(token, video_id, comment_index)

    def set_client_callback(self, token: str, callback: ClientCallback, weak: bool = False) -> CallbackRegistration:
        return self.next_backend().set_client_callback(token, callback, weak=weak)

    def subscribe_for(self, token: str, user_name: str) -> None:
        self.next_backend().subscribe_for(token, user_name)

    def release_pending_notifications(self, token: str) -> None:
        self.next_backend().release_pending_notifications(token)

    def pending_notifications(self, token: str) -> List[Notification]:
        return self.next_backend().pending_notifications(token)

    def search_users(self, request: Sequence[str]) -> List[str]:
        return self.next_backend().search_users(request)

    def user_videos(self, user_name: str) -> List[Video]:
        return self.next_backend().user_videos(user_name)
