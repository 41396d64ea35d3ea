import threading
from collections import Counter

from videohub.backend import BackendService, ServiceContext
from videohub.db.models import Notification, Video
from videohub.errors import UserAlreadyExists
from videohub.notifications.hub import NotificationHub
from videohub.proxy import DispatchProxy


def _run_threads(count, target):
    barrier = threading.Barrier(count)
    errors = []

    def worker(i):
        barrier.wait()
        try:
            target(i)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return errors


def test_only_one_registration_wins():
    backend = BackendService()
    errors = _run_threads(32, lambda i: backend.register_user("x", f"pw{i}"))
    assert len(errors) == 31
    assert all(isinstance(e, UserAlreadyExists) for e in errors)
    assert [user.name for user in backend.context.identities.users()] == ["x"]


def test_concurrent_likes_count_each_user_once():
    backend = BackendService()
    tokens = []
    for i in range(16):
        backend.register_user(f"fan{i}", "pw")
        tokens.append(backend.auth(f"fan{i}", "pw"))
    backend.register_user("owner", "pw")
    video = backend.add_video(backend.auth("owner", "pw"), "Hello", b"")

    errors = _run_threads(64, lambda i: backend.leave_like(tokens[i % 16], video.id))

    assert errors == []
    assert video.like_count == 16


def test_concurrent_comments_are_all_kept():
    backend = BackendService()
    backend.register_user("a", "pw")
    token = backend.auth("a", "pw")
    video = backend.add_video(token, "Hello", b"")

    errors = _run_threads(32, lambda i: backend.leave_comment(token, video.id, f"c{i}"))

    assert errors == []
    assert sorted(c.content for c in video.comments) == sorted(f"c{i}" for i in range(32))


def test_hub_register_notify_cancel_under_contention():
    hub = NotificationHub()
    notification = Notification(video=Video(id="abcde", title="t", owner="b"), uploader="b")
    inboxes = [[] for _ in range(24)]
    kept = []
    lock = threading.Lock()

    def work(i):
        if i % 3 == 0:
            for _ in range(50):
                hub.notify("a", notification)
            return
        registration = hub.register("a", inboxes[i].append)
        hub.notify("a", notification)
        if i % 3 == 1:
            registration.cancel()
        else:
            with lock:
                kept.append(i)

    errors = _run_threads(24, work)

    assert errors == []
    assert hub.live_count("a") == len(kept)
    before = [len(inbox) for inbox in inboxes]
    assert hub.notify("a", notification) == len(kept)
    for i, inbox in enumerate(inboxes):
        assert len(inbox) == before[i] + (1 if i in kept else 0)


def test_proxy_cursor_spreads_calls_evenly():
    counts = Counter()
    counts_lock = threading.Lock()

    class CountingBackend(BackendService):
        def __init__(self, label, context):
            super().__init__(context)
            self.label = label

        def search_videos(self, request):
            with counts_lock:
                counts[self.label] += 1
            return []

    context = ServiceContext()
    proxy = DispatchProxy([CountingBackend(i, context) for i in range(3)])

    def calls(i):
        for _ in range(10):
            proxy.search_videos([])

    errors = _run_threads(30, calls)

    assert errors == []
    assert counts == Counter({0: 100, 1: 100, 2: 100})
    assert proxy.round_robin_index == 300
