from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Dict, Hashable, Protocol, Set, Tuple

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """A connected client able to receive messages for one of its subscriptions."""

    session_id: Hashable

    def deliver(self, destination: str, subscription_id: str, body: str) -> None:
        raise NotImplementedError


class TopicBroker:
    """Thread-safe in-process pub/sub keyed by destination."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_destination: Dict[str, Set[Tuple[Subscriber, str]]] = defaultdict(set)
        self._by_session: Dict[Subscriber, Dict[str, str]] = defaultdict(dict)

    def subscribe(self, session: Subscriber, subscription_id: str, destination: str) -> None:
        with self._lock:
            previous = self._by_session[session].get(subscription_id)
            if previous is not None:
                self._by_destination[previous].discard((session, subscription_id))
            self._by_session[session][subscription_id] = destination
            self._by_destination[destination].add((session, subscription_id))
        logger.debug("Session %s subscribed %s to %s", session.session_id, subscription_id, destination)

    def unsubscribe(self, session: Subscriber, subscription_id: str) -> bool:
        with self._lock:
            destination = self._by_session.get(session, {}).pop(subscription_id, None)
            if destination is None:
                return False
            subs = self._by_destination.get(destination)
            if subs is not None:
                subs.discard((session, subscription_id))
                if not subs:
                    del self._by_destination[destination]
            return True

    def disconnect(self, session: Subscriber) -> None:
        with self._lock:
            for subscription_id, destination in self._by_session.pop(session, {}).items():
                subs = self._by_destination.get(destination)
                if subs is None:
                    continue
                subs.discard((session, subscription_id))
                if not subs:
                    del self._by_destination[destination]

    def subscriber_count(self, destination: str) -> int:
        with self._lock:
            return len(self._by_destination.get(destination, ()))

    def publish(self, destination: str, body: str) -> int:
        with self._lock:
            targets = list(self._by_destination.get(destination, ()))

        delivered = 0
        for session, subscription_id in targets:
            try:
                session.deliver(destination, subscription_id, body)
                delivered += 1
            except Exception:
                logger.exception("Dropping session %s after failed send to %s", session.session_id, destination)
                self.disconnect(session)
        return delivered
