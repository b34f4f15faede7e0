from __future__ import annotations

import json
from datetime import datetime

from src.field_attendance.field_attendance.locations.model import LocationSample
from src.field_attendance.field_attendance.realtime.broker import TopicBroker
from src.field_attendance.field_attendance.realtime.publisher import LocationEventPublisher


class Session:
    def __init__(self, session_id, fail=False):
        self.session_id = session_id
        self.fail = fail
        self.received = []

    def deliver(self, destination, subscription_id, body):
        if self.fail:
            raise ConnectionError("socket closed")
        self.received.append((destination, subscription_id, body))


def test_publish_reaches_only_subscribers_of_destination():
    broker = TopicBroker()
    a, b = Session("a"), Session("b")
    broker.subscribe(a, "s1", "/topic/one")
    broker.subscribe(b, "s1", "/topic/two")

    assert broker.publish("/topic/one", "hello") == 1
    assert a.received == [("/topic/one", "s1", "hello")]
    assert b.received == []


def test_unsubscribe_and_disconnect():
    broker = TopicBroker()
    a = Session("a")
    broker.subscribe(a, "s1", "/topic/one")
    broker.subscribe(a, "s2", "/topic/two")

    assert broker.unsubscribe(a, "s1")
    assert not broker.unsubscribe(a, "s1")
    assert broker.publish("/topic/one", "x") == 0

    broker.disconnect(a)
    assert broker.subscriber_count("/topic/two") == 0


def test_failed_session_is_dropped():
    broker = TopicBroker()
    good, bad = Session("good"), Session("bad", fail=True)
    broker.subscribe(good, "s", "/topic/one")
    broker.subscribe(bad, "s", "/topic/one")

    assert broker.publish("/topic/one", "x") == 1
    assert broker.subscriber_count("/topic/one") == 1


def test_location_publisher_fans_out_to_global_and_user_topics():
    broker = TopicBroker()
    everyone, mine, other = Session("e"), Session("m"), Session("o")
    broker.subscribe(everyone, "0", "/topic/location.latest")
    broker.subscribe(mine, "0", "/topic/location.user.1234_Asha")
    broker.subscribe(other, "0", "/topic/location.user.5678_Ravi")
    sample = LocationSample(id=7, user_name="1234_Asha", lat=26.8, lon=80.9, timestamp=datetime(2025, 2, 10, 9, 30))

    delivered = LocationEventPublisher(broker).publish(sample)

    assert delivered == 2
    payload = json.loads(everyone.received[0][2])
    assert payload == {
        "id": 7,
        "userName": "1234_Asha",
        "lat": 26.8,
        "lon": 80.9,
        "timestamp": "2025-02-10T09:30:00",
        "location": {"lat": 26.8, "lng": 80.9},
    }
    assert mine.received[0][2] == everyone.received[0][2]
    assert other.received == []
