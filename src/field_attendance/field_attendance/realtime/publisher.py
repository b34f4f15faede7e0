from __future__ import annotations

import json
import logging

from ..core.constants import LOCATION_LATEST_TOPIC, LOCATION_USER_TOPIC_PREFIX
from ..locations.model import LocationSample
from .broker import TopicBroker

logger = logging.getLogger(__name__)


def location_payload(sample: LocationSample) -> dict:
    return {
        "id": sample.id,
        "userName": sample.user_name,
        "lat": sample.lat,
        "lon": sample.lon,
        "timestamp": sample.timestamp.isoformat(timespec="seconds"),
        "location": {"lat": sample.lat, "lng": sample.lon},
    }


class LocationEventPublisher:
    def __init__(self, broker: TopicBroker):
        self._broker = broker

    def publish(self, sample: LocationSample) -> int:
        """Send the sample to the global topic and to the user's own topic."""
        body = json.dumps(location_payload(sample))
        delivered = self._broker.publish(LOCATION_LATEST_TOPIC, body)
        delivered += self._broker.publish(LOCATION_USER_TOPIC_PREFIX + sample.user_name, body)
        logger.debug("Location %s of %s delivered to %d subscribers", sample.id, sample.user_name, delivered)
        return delivered
