import pytest

from videohub.backend import BackendService, ServiceContext
from videohub.proxy import DispatchProxy


class RecordingBackend(BackendService):
    def __init__(self, label, calls, context):
        super().__init__(context)
        self.label = label
        self.calls = calls

    def search_videos(self, request):
        self.calls.append(self.label)
        return super().search_videos(request)


def test_round_robin_starts_at_second_backend():
    calls = []
    context = ServiceContext()
    proxy = DispatchProxy([RecordingBackend(i, calls, context) for i in range(3)])
    for _ in range(7):
        proxy.search_videos(["x"])
    assert calls == [1, 2, 0, 1, 2, 0, 1]


def test_single_backend_gets_every_call():
    calls = []
    proxy = DispatchProxy([RecordingBackend("only", calls, ServiceContext())])
    proxy.search_videos([])
    proxy.search_videos([])
    assert calls == ["only", "only"]


def test_empty_proxy_is_rejected():
    with pytest.raises(ValueError):
        DispatchProxy([])


def test_replicas_sharing_a_context_behave_as_one_backend():
    context = ServiceContext()
    proxy = DispatchProxy([BackendService(context) for _ in range(3)])
    proxy.register_user("a", "pw")
    proxy.register_user("b", "pw")
    a = proxy.auth("a", "pw")
    b = proxy.auth("b", "pw")
    proxy.subscribe_for(a, "b")
    received = []
    proxy.set_client_callback(a, received.append)

    video = proxy.add_video(b, "Hello world", b"bytes")
    proxy.leave_comment(a, video.id, "nice")
    proxy.leave_like(a, video.id, 0)

    assert proxy.get_video(video.id).comments[0].like_count == 1
    assert proxy.download_video(video.id) == b"bytes"
    assert proxy.search_videos(["world"]) == [video]
    assert [n.video for n in received] == [video]
    assert len(proxy.pending_notifications(a)) == 1
    proxy.release_pending_notifications(a)
    assert proxy.pending_notifications(a) == []
    assert proxy.search_users(["b"]) == ["b"]
    assert proxy.user_videos("b") == [video]
