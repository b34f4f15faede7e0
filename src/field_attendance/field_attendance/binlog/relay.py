from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Mapping, Optional

from pymysqlreplication import BinLogStreamReader
from pymysqlreplication.row_event import UpdateRowsEvent, WriteRowsEvent

from ..database.connection import DBConfig
from ..database.mysql_base import normalize_mysql_datetime
from ..locations.model import LocationSample
from ..realtime.publisher import LocationEventPublisher

logger = logging.getLogger(__name__)

_POSITIONAL_COLUMNS = ("id", "user_name", "lat", "lon", "timestamp")


def _positional(values: Mapping[Any, Any]) -> dict:
    """Map UNKNOWN_COL0.. keys, used when the server omits column names."""
    ordered = [values[k] for k in sorted(values, key=_column_index)]
    return dict(zip(_POSITIONAL_COLUMNS, ordered))


def _column_index(key: Any) -> int:
    if isinstance(key, int):
        return key
    digits = "".join(ch for ch in str(key) if ch.isdigit())
    return int(digits) if digits else 0


def row_to_sample(values: Mapping[Any, Any]) -> Optional[LocationSample]:
    """Build a sample from a row image; None when the row cannot be mapped."""
    if not values:
        return None
    row = values if "user_name" in values else _positional(values)
    try:
        timestamp = normalize_mysql_datetime(row["timestamp"])
        if timestamp is None:
            raise ValueError("timestamp is null")
        return LocationSample(
            id=int(row["id"]) if row.get("id") is not None else None,
            user_name=str(row["user_name"]),
            lat=float(row["lat"]),
            lon=float(row["lon"]),
            timestamp=timestamp,
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("Dropping unmappable replication row: %r", dict(values))
        return None


def row_image(event: Any, row: Mapping[str, Any]) -> Mapping[Any, Any]:
    if isinstance(event, UpdateRowsEvent):
        return row.get("after_values") or {}
    return row.get("values") or {}


class BinlogRelay:
    """Follows inserts/updates on the location table and publishes them.

    Runs on one daemon thread. Stream failures are logged and the reader is
    reopened with capped exponential backoff until stop() is called.
    """

    def __init__(
        self,
        db: DBConfig,
        publisher: LocationEventPublisher,
        *,
        server_id: int = 100,
        table: str = "wff_location_tracking",
        retry_initial_seconds: float = 1.0,
        retry_max_seconds: float = 60.0,
        reader_factory: Optional[Callable[..., Any]] = None,
    ):
        self._db = db
        self._publisher = publisher
        self._server_id = server_id
        self._table = table
        self._retry_initial = retry_initial_seconds
        self._retry_max = retry_max_seconds
        self._reader_factory = reader_factory or BinLogStreamReader
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._reader = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="binlog-relay", daemon=True)
        self._thread.start()
        logger.info("Binlog relay started for %s.%s", self._db.database, self._table)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        reader = self._reader
        if reader is not None:
            try:
                reader.close()
            except Exception:
                logger.debug("Error while closing binlog reader", exc_info=True)
        if self._thread is not None:
            self._thread.join(timeout)
        logger.info("Binlog relay stopped")

    def _open_reader(self):
        settings = {
            "host": self._db.host,
            "port": self._db.port,
            "user": self._db.user,
            "passwd": self._db.password,
        }
        return self._reader_factory(
            connection_settings=settings,
            server_id=self._server_id,
            only_events=[WriteRowsEvent, UpdateRowsEvent],
            only_schemas=[self._db.database],
            only_tables=[self._table],
            resume_stream=True,
            blocking=True,
        )

    def handle_event(self, event: Any) -> int:
        published = 0
        for row in getattr(event, "rows", ()):
            sample = row_to_sample(row_image(event, row))
            if sample is None:
                continue
            try:
                self._publisher.publish(sample)
                published += 1
            except Exception:
                logger.exception("Failed to publish location %s", sample.id)
        return published

    def _run(self) -> None:
        delay = self._retry_initial
        while not self._stop.is_set():
            try:
                self._reader = self._open_reader()
                for event in self._reader:
                    if self._stop.is_set():
                        break
                    self.handle_event(event)
                    delay = self._retry_initial
            except Exception:
                if self._stop.is_set():
                    break
                logger.exception("Binlog stream failed, reconnecting in %.0fs", delay)
            finally:
                reader, self._reader = self._reader, None
                if reader is not None:
                    try:
                        reader.close()
                    except Exception:
                        logger.debug("Error while closing binlog reader", exc_info=True)
            if self._stop.wait(delay):
                break
            delay = min(delay * 2, self._retry_max)
