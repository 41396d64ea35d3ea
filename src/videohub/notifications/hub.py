"""Live delivery of upload notifications to connected clients.

Each connection registers a callback and gets a ``CallbackRegistration``
back; cancelling it (on disconnect) stops delivery. Registrations made with
``weak=True`` hold the callback weakly and vanish when the owner is
collected. Cancelled and dead registrations are pruned on the next dispatch
for that user. Registering the same live callback twice for one user
yields the same registration.
"""
import logging
import threading
import weakref
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from videohub.db.models import Notification

logger = logging.getLogger("notifications")

ClientCallback = Callable[[Notification], None]


class CallbackRegistration:
    def __init__(self, hub: "NotificationHub", user_name: str, callback: ClientCallback, weak: bool = False):
        self._hub = hub
        self.user_name = user_name
        self._cancelled = False
        if not weak:
            self._ref = lambda: callback
        elif hasattr(callback, "__self__") and hasattr(callback, "__func__"):
            self._ref = weakref.WeakMethod(callback)
        else:
            self._ref = weakref.ref(callback)

    @property
    def callback(self) -> Optional[ClientCallback]:
        if self._cancelled:
            return None
        return self._ref()

    @property
    def alive(self) -> bool:
        return self.callback is not None

    def cancel(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._hub.prune(self.user_name)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.cancel()


class NotificationHub:
    def __init__(self):
        self._registrations: Dict[str, List[CallbackRegistration]] = defaultdict(list)
        self._lock = threading.Lock()

    def register(self, user_name: str, callback: ClientCallback, weak: bool = False) -> CallbackRegistration:
        """Add ``callback`` for ``user_name``.

        A callback that is already registered and live for this user is not
        added again; its existing registration is returned instead.
        """
        with self._lock:
            for existing in self._registrations.get(user_name, ()):
                if existing.callback == callback:
                    return existing
            registration = CallbackRegistration(self, user_name, callback, weak=weak)
            self._registrations[user_name].append(registration)
        logger.info(f"Registered live callback for user {user_name}")
        return registration

    def prune(self, user_name: str) -> None:
        with self._lock:
            self._live_callbacks(user_name)

    def live_count(self, user_name: str) -> int:
        with self._lock:
            return len(self._live_callbacks(user_name))

    def _live_callbacks(self, user_name: str) -> List[ClientCallback]:
        # Caller holds self._lock.
        registrations = self._registrations.get(user_name)
        if not registrations:
            return []
        callbacks = []
        kept = []
        for registration in registrations:
            callback = registration.callback
            if callback is not None:
                kept.append(registration)
                callbacks.append(callback)
        if kept:
            self._registrations[user_name] = kept
        else:
            del self._registrations[user_name]
        return callbacks

    def notify(self, user_name: str, notification: Notification) -> int:
        """Deliver ``notification`` to every live callback of ``user_name``.

        A failing callback is logged and skipped. Returns how many callbacks
        accepted the notification.
        """
        with self._lock:
            callbacks = self._live_callbacks(user_name)
        return sum(self._deliver(user_name, callback, notification) for callback in callbacks)

    def replay(self, registration: CallbackRegistration, notifications: Iterable[Notification]) -> int:
        callback = registration.callback
        if callback is None:
            return 0
        return sum(self._deliver(registration.user_name, callback, n) for n in notifications)

    @staticmethod
    def _deliver(user_name: str, callback: ClientCallback, notification: Notification) -> bool:
        try:
            callback(notification)
        except Exception:
            logger.exception(f"Callback for user {user_name} failed on video {notification.video.id}")
            return False
        return True
