from __future__ import annotations

from src.field_attendance.field_attendance.common.executor import BoundedExecutor
from src.field_attendance.field_attendance.employees.face_recognition import FaceRecognitionClient
from src.field_attendance.field_attendance.storage.file_storage import FileStorageService


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code


class FakeSession:
    def __init__(self, status_code=200, error=None):
        self.status_code = status_code
        self.error = error
        self.calls = []

    def post(self, url, data=None, files=None, timeout=None):
        self.calls.append({"url": url, "data": data, "file": files["file"][0], "timeout": timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)


def _client(tmp_path, session, *, enabled=True, url="http://face.local/register"):
    storage = FileStorageService(tmp_path)
    (tmp_path / "Asha_01012025" / "Face").mkdir(parents=True)
    (tmp_path / "Asha_01012025" / "Face" / "Asha_photo.png").write_bytes(b"png")
    executor = BoundedExecutor(max_workers=1, queue_capacity=1, name="face-test")
    return FaceRecognitionClient(storage, executor, api_url=url, enabled=enabled, timeout_seconds=3, session=session)


def test_user_key_strips_card_and_replaces_name():
    assert FaceRecognitionClient.user_key("UP-12/34", "Asha Verma") == "UP1234_Asha_Verma"


def test_submit_posts_photo_in_background(tmp_path):
    session = FakeSession()
    client = _client(tmp_path, session)

    future = client.submit("UP-12", "Asha", "Asha_01012025/Face/Asha_photo.png")

    assert future.result(timeout=5) is True
    assert session.calls == [
        {"url": "http://face.local/register", "data": {"idusername": "UP12_Asha"}, "file": "Asha_photo.png", "timeout": 3}
    ]


def test_failures_are_swallowed(tmp_path):
    client = _client(tmp_path, FakeSession(error=ConnectionError("down")))
    assert client.send("UP-12", "Asha", "Asha_01012025/Face/Asha_photo.png") is False

    client = _client(tmp_path / "other", FakeSession(status_code=500))
    assert client.send("UP-12", "Asha", "Asha_01012025/Face/Asha_photo.png") is False


def test_missing_photo_is_not_sent(tmp_path):
    session = FakeSession()
    client = _client(tmp_path, session)

    assert client.send("UP-12", "Asha", "nope/photo.png") is False
    assert session.calls == []


def test_disabled_or_unconfigured_client_does_nothing(tmp_path):
    session = FakeSession()

    assert _client(tmp_path, session, enabled=False).submit("1", "A", "x.png") is None
    assert _client(tmp_path / "b", session, url="").submit("1", "A", "x.png") is None
    assert session.calls == []
