from __future__ import annotations

from src.field_attendance.field_attendance.realtime.broker import TopicBroker
from src.field_attendance.field_attendance.realtime.endpoint import StompSession, serve
from src.field_attendance.field_attendance.realtime.stomp import decode_frame


class FakeWebSocket:
    def __init__(self, incoming=()):
        self.incoming = list(incoming)
        self.sent = []

    def send(self, data):
        self.sent.append(decode_frame(data))

    def receive(self):
        return self.incoming.pop(0) if self.incoming else None


def _connected():
    broker = TopicBroker()
    ws = FakeWebSocket()
    session = StompSession(ws, broker)
    assert session.handle_text("CONNECT\naccept-version:1.2\nhost:localhost\n\n\x00")
    return broker, ws, session


def test_connect_replies_connected():
    _, ws, _ = _connected()

    assert ws.sent[0].command == "CONNECTED"
    assert ws.sent[0].header("version") == "1.2"
    assert ws.sent[0].header("heart-beat") == "0,0"


def test_subscribe_then_receive_message_with_receipt():
    broker, ws, session = _connected()

    session.handle_text("SUBSCRIBE\nid:sub-1\ndestination:/topic/location.latest\nreceipt:r1\n\n\x00")
    broker.publish("/topic/location.latest", '{"id": 1}')

    assert ws.sent[1].command == "RECEIPT"
    assert ws.sent[1].header("receipt-id") == "r1"
    message = ws.sent[2]
    assert message.command == "MESSAGE"
    assert message.header("subscription") == "sub-1"
    assert message.body == '{"id": 1}'


def test_send_is_relayed_for_topic_destinations_only():
    broker, ws, session = _connected()
    session.handle_text("SUBSCRIBE\nid:0\ndestination:/topic/chat\n\n\x00")

    assert session.handle_text("SEND\ndestination:/topic/chat\n\nhi\x00")
    assert ws.sent[-1].body == "hi"

    assert not session.handle_text("SEND\ndestination:/app/anything\n\nhi\x00")
    assert ws.sent[-1].command == "ERROR"


def test_frames_before_connect_are_errors():
    ws = FakeWebSocket()
    session = StompSession(ws, TopicBroker())

    assert not session.handle_text("SUBSCRIBE\nid:0\ndestination:/topic/a\n\n\x00")
    assert ws.sent[0].command == "ERROR"


def test_unknown_command_is_error():
    _, ws, session = _connected()

    assert not session.handle_text("BEGIN\ntransaction:t1\n\n\x00")
    assert ws.sent[-1].command == "ERROR"


def test_serve_cleans_up_subscriptions_on_disconnect():
    broker = TopicBroker()
    ws = FakeWebSocket(
        [
            "CONNECT\naccept-version:1.2\n\n\x00",
            "\n",
            "SUBSCRIBE\nid:0\ndestination:/topic/location.latest\n\n\x00",
            "DISCONNECT\nreceipt:bye\n\n\x00",
        ]
    )

    serve(ws, broker)

    assert [f.command for f in ws.sent] == ["CONNECTED", "RECEIPT"]
    assert broker.subscriber_count("/topic/location.latest") == 0
