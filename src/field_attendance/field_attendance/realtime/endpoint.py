from __future__ import annotations

import itertools
import logging
import threading
import uuid
from typing import Optional

from flask import Flask
from flask_sock import Sock
from simple_websocket import ConnectionClosed

from ..container import Container
from .broker import TopicBroker
from .stomp import NULL, Frame, FrameError, decode_frame, encode_frame

logger = logging.getLogger(__name__)

STOMP_VERSION = "1.2"
RELAY_PREFIXES = ("/topic/", "/queue/")


class StompSession:
    """Server side of one STOMP-over-WebSocket connection."""

    def __init__(self, ws, broker: TopicBroker):
        self.session_id = uuid.uuid4().hex
        self.connected = False
        self._ws = ws
        self._broker = broker
        self._send_lock = threading.Lock()
        self._message_ids = itertools.count(1)

    def send(self, frame: Frame) -> None:
        with self._send_lock:
            self._ws.send(encode_frame(frame))

    def deliver(self, destination: str, subscription_id: str, body: str) -> None:
        self.send(
            Frame(
                "MESSAGE",
                {
                    "destination": destination,
                    "subscription": subscription_id,
                    "message-id": f"{self.session_id}-{next(self._message_ids)}",
                    "content-type": "application/json",
                },
                body,
            )
        )

    def error(self, message: str, frame: Optional[Frame] = None) -> None:
        headers = {"message": message}
        if frame is not None and frame.header("receipt"):
            headers["receipt-id"] = frame.header("receipt")
        self.send(Frame("ERROR", headers))

    def handle_text(self, data: str) -> bool:
        """Handle one WebSocket message; returns False when the connection should close."""
        for chunk in data.split(NULL):
            if not chunk.strip("\r\n"):
                continue
            try:
                frame = decode_frame(chunk + NULL)
            except FrameError as exc:
                self.error(str(exc))
                return False
            if frame is not None and not self.handle(frame):
                return False
        return True

    def handle(self, frame: Frame) -> bool:
        command = frame.command
        if command in ("CONNECT", "STOMP"):
            self.connected = True
            self.send(
                Frame("CONNECTED", {"version": STOMP_VERSION, "heart-beat": "0,0", "session": self.session_id})
            )
            return True

        if not self.connected:
            self.error("Not connected", frame)
            return False

        if command == "SUBSCRIBE":
            destination, sub_id = frame.header("destination"), frame.header("id")
            if not destination or not sub_id:
                self.error("SUBSCRIBE requires destination and id headers", frame)
                return False
            self._broker.subscribe(self, sub_id, destination)
        elif command == "UNSUBSCRIBE":
            sub_id = frame.header("id")
            if not sub_id:
                self.error("UNSUBSCRIBE requires an id header", frame)
                return False
            self._broker.unsubscribe(self, sub_id)
        elif command == "SEND":
            destination = frame.header("destination") or ""
            if not destination.startswith(RELAY_PREFIXES):
                self.error(f"Cannot send to destination: {destination}", frame)
                return False
            self._broker.publish(destination, frame.body)
        elif command == "DISCONNECT":
            self._receipt(frame)
            return False
        else:
            self.error(f"Unsupported command: {command}", frame)
            return False

        self._receipt(frame)
        return True

    def _receipt(self, frame: Frame) -> None:
        receipt = frame.header("receipt")
        if receipt:
            self.send(Frame("RECEIPT", {"receipt-id": receipt}))

    def close(self) -> None:
        self._broker.disconnect(self)


def serve(ws, broker: TopicBroker) -> None:
    session = StompSession(ws, broker)
    logger.info("WebSocket session %s opened", session.session_id)
    try:
        while True:
            data = ws.receive()
            if data is None:
                break
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            if not session.handle_text(data):
                break
    except ConnectionClosed:
        logger.debug("WebSocket session %s dropped by client", session.session_id)
    finally:
        session.close()
        logger.info("WebSocket session %s closed", session.session_id)


def register(app: Flask, container: Container) -> Sock:
    sock = Sock(app)

    @sock.route("/ws", endpoint="stomp_ws")
    def stomp_ws(ws):
        serve(ws, container.broker)

    return sock
