import pytest

from src.field_attendance.field_attendance.realtime.stomp import (
    Frame,
    FrameError,
    decode_frame,
    encode_frame,
    escape_header,
    unescape_header,
)


def test_encode_adds_content_length_and_escapes_headers():
    raw = encode_frame(Frame("MESSAGE", {"destination": "/topic/a:b"}, "héllo"))

    assert raw.startswith("MESSAGE\ndestination:/topic/a\\cb\n")
    assert "content-length:6\n" in raw
    assert raw.endswith("\n\nhéllo\x00")


def test_decode_subscribe_frame():
    frame = decode_frame("SUBSCRIBE\nid:sub-0\ndestination:/topic/location.latest\n\n\x00")

    assert frame.command == "SUBSCRIBE"
    assert frame.header("id") == "sub-0"
    assert frame.header("destination") == "/topic/location.latest"
    assert frame.body == ""


def test_decode_respects_content_length_and_first_header_wins():
    frame = decode_frame("SEND\ndestination:/topic/x\ndestination:/topic/y\ncontent-length:3\n\na\x00b\x00")

    assert frame.header("destination") == "/topic/x"
    assert frame.body == "a\x00b"


def test_connect_headers_are_not_unescaped():
    frame = decode_frame("CONNECT\naccept-version:1.2\nhost:example.org\\c1\n\n\x00")

    assert frame.header("host") == "example.org\\c1"


def test_heartbeats_decode_to_none():
    assert decode_frame("\n") is None
    assert decode_frame("\r\n\r\n") is None


def test_header_escaping():
    assert escape_header("a:b\nc\\") == "a\\cb\\nc\\\\"
    assert unescape_header("a\\cb\\nc\\\\") == "a:b\nc\\"
    with pytest.raises(FrameError):
        unescape_header("bad\\t")


def test_malformed_frames():
    with pytest.raises(FrameError):
        decode_frame("SEND\ndestination:/topic/x\x00")
    with pytest.raises(FrameError):
        decode_frame("SEND\nno-colon-here\n\n\x00")
