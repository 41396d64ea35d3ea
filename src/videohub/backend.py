import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from videohub.config import settings
from videohub.db.models import Notification, User, Video
from videohub.db.session import SessionRegistry
from videohub.db.storage import ContentStore, IdentityStore
from videohub.ids import RandomSequenceGenerator
from videohub.notifications.hub import CallbackRegistration, ClientCallback, NotificationHub
from videohub.search import SearchEngine

logger = logging.getLogger("backend")


class Backend(ABC):
    """Service contract consumed by clients (and by the HTTP routers)."""

    @abstractmethod
    def auth(self, name: str, password: str) -> str: ...

    @abstractmethod
    def register_user(self, name: str, password: str) -> None: ...

    @abstractmethod
    def add_video(self, token: str, title: str, content: bytes) -> Video: ...

    @abstractmethod
    def search_videos(self, request: Sequence[str]) -> List[Video]: ...

    @abstractmethod
    def get_video(self, video_id: str) -> Video: ...

    @abstractmethod
    def download_video(self, video_id: str) -> bytes: ...

    @abstractmethod
    def leave_comment(self, token: str, video_id: str, text: str, reply_to: Optional[int] = None) -> None: ...

    @abstractmethod
    def leave_like(self, token: str, video_id: str, comment_index: Optional[int] = None) -> None: ...

    @abstractmethod
    def set_client_callback(self, token: str, callback: ClientCallback, weak: bool = False) -> CallbackRegistration: ...

    @abstractmethod
    def subscribe_for(self, token: str, user_name: str) -> None: ...

    @abstractmethod
    def release_pending_notifications(self, token: str) -> None: ...

    @abstractmethod
    def pending_notifications(self, token: str) -> List[Notification]: ...

    @abstractmethod
    def search_users(self, request: Sequence[str]) -> List[str]: ...

    @abstractmethod
    def user_videos(self, user_name: str) -> List[Video]: ...


class ServiceContext:
    """All mutable state of one deployment.

    Several BackendService instances may share a context; ``lock`` guards the
    stores and the per-user pending queues.
    """

    def __init__(
        self,
        generator: Optional[RandomSequenceGenerator] = None,
        skip_pending_when_delivered: bool = settings.SKIP_PENDING_WHEN_DELIVERED,
    ):
        self.generator = generator or RandomSequenceGenerator(max_attempts=settings.ID_MAX_ATTEMPTS)
        self.lock = threading.RLock()
        self.identities = IdentityStore()
        self.content = ContentStore(self.generator)
        self.sessions = SessionRegistry(self.generator)
        self.hub = NotificationHub()
        self.skip_pending_when_delivered = skip_pending_when_delivered
        self.video_search = SearchEngine(self.content.videos, lambda video: video.title)
        self.user_search = SearchEngine(self.identities.users, lambda user: user.name)


class BackendService(Backend):
    """Authorization boundary and orchestration over a ServiceContext."""

    def __init__(self, context: Optional[ServiceContext] = None):
        self.context = context or ServiceContext()

    def _check_credentials(self, token: str) -> User:
        return self.context.sessions.resolve(token)

    def auth(self, name: str, password: str) -> str:
        ctx = self.context
        with ctx.lock:
            user = ctx.identities.authenticate(name, password)
            return ctx.sessions.issue_token(user)

    def register_user(self, name: str, password: str) -> None:
        with self.context.lock:
            self.context.identities.register(name, password)

    def add_video(self, token: str, title: str, content: bytes) -> Video:
        ctx = self.context
        with ctx.lock:
            user = self._check_credentials(token)
            video = ctx.content.create_video(user, title, content)
            followers = [ctx.identities.get(name) for name in sorted(user.followers)]
        self._push_notification_from(user, followers, Notification(video=video, uploader=user.name))
        return video

    def _push_notification_from(self, user: User, followers: List[User], notification: Notification) -> None:
        for follower in followers:
            self._push_notification_to(follower, notification)
        logger.info(f"Fanned out video {notification.video.id} from {user.name} to {len(followers)} followers")

    def _push_notification_to(self, follower: User, notification: Notification) -> None:
        delivered = self.context.hub.notify(follower.name, notification)
        if delivered and self.context.skip_pending_when_delivered:
            return
        with self.context.lock:
            follower.defer_notification(notification)

    def search_videos(self, request: Sequence[str]) -> List[Video]:
        with self.context.lock:
            return self.context.video_search.search(request)

    def search_users(self, request: Sequence[str]) -> List[str]:
        with self.context.lock:
            return [user.name for user in self.context.user_search.search(request)]

    def get_video(self, video_id: str) -> Video:
        with self.context.lock:
            return self.context.content.get_video(video_id)

    def download_video(self, video_id: str) -> bytes:
        with self.context.lock:
            return self.context.content.get_content(video_id)

    def user_videos(self, user_name: str) -> List[Video]:
        with self.context.lock:
            return list(self.context.identities.get(user_name).videos)

    def leave_comment(self, token: str, video_id: str, text: str, reply_to: Optional[int] = None) -> None:
        ctx = self.context
        with ctx.lock:
            user = self._check_credentials(token)
            video = ctx.content.get_video(video_id)
            if reply_to is None:
                ctx.content.add_comment(video, user.name, text)
            else:
                ctx.content.add_reply(video, reply_to, user.name, text)
        logger.info(f"User {user.name} commented on video {video_id}")

    def leave_like(self, token: str, video_id: str, comment_index: Optional[int] = None) -> None:
        ctx = self.context
        with ctx.lock:
            user = self._check_credentials(token)
            video = ctx.content.get_video(video_id)
            target = video if comment_index is None else ctx.content.comment_at(video, comment_index)
            ctx.content.like(target, user.name)

    def set_client_callback(self, token: str, callback: ClientCallback, weak: bool = False) -> CallbackRegistration:
        ctx = self.context
        with ctx.lock:
            user = self._check_credentials(token)
            pending = list(user.pending_notifications)
        registration = ctx.hub.register(user.name, callback, weak=weak)
        ctx.hub.replay(registration, pending)
        return registration

    def subscribe_for(self, token: str, user_name: str) -> None:
        ctx = self.context
        with ctx.lock:
            user = self._check_credentials(token)
            ctx.identities.follow(user, user_name)

    def release_pending_notifications(self, token: str) -> None:
        with self.context.lock:
            self._check_credentials(token).release_pending_notifications()

    def pending_notifications(self, token: str) -> List[Notification]:
        with self.context.lock:
            return list(self._check_credentials(token).pending_notifications)
