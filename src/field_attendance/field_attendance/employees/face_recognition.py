from __future__ import annotations

import logging
import re
from concurrent.futures import Future
from typing import Optional

import requests

from ..common.executor import BoundedExecutor
from ..storage.file_storage import FileStorageService

logger = logging.getLogger(__name__)


class FaceRecognitionClient:
    """Best-effort, at-most-once notification of a new employee face photo.

    The POST runs on a bounded worker pool and never affects the caller:
    disabled config, missing files, HTTP errors and exceptions are only logged.
    """

    def __init__(
        self,
        storage: FileStorageService,
        executor: BoundedExecutor,
        *,
        api_url: str = "",
        enabled: bool = False,
        timeout_seconds: float = 30,
        session: Optional[requests.Session] = None,
    ):
        self._storage = storage
        self._executor = executor
        self._api_url = (api_url or "").strip()
        self._enabled = enabled
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return self._enabled and bool(self._api_url)

    @staticmethod
    def user_key(identity_card: str, user_name: str) -> str:
        if identity_card is None or user_name is None:
            raise ValueError("Identity card number and user name cannot be None")
        card = re.sub(r"[^a-zA-Z0-9]", "", identity_card)
        name = re.sub(r"[^a-zA-Z0-9]", "_", user_name)
        return f"{card}_{name}"

    def submit(self, identity_card: str, user_name: str, face_photo_path: str) -> Optional[Future]:
        if not self._enabled:
            logger.debug("Face recognition disabled, skipping %s", user_name)
            return None
        if not self._api_url:
            logger.warning("Face recognition API URL is not configured, skipping %s", user_name)
            return None
        return self._executor.submit(self.send, identity_card, user_name, face_photo_path)

    def send(self, identity_card: str, user_name: str, face_photo_path: str) -> bool:
        try:
            key = self.user_key(identity_card, user_name)
            if not self._storage.exists(face_photo_path):
                logger.error("Face photo not found at %s", face_photo_path)
                return False

            logger.info("Sending face recognition data for %s with key %s", user_name, key)
            path = self._storage.absolute_path(face_photo_path)
            with path.open("rb") as fh:
                response = self._session.post(
                    self._api_url,
                    data={"idusername": key},
                    files={"file": (path.name, fh)},
                    timeout=self._timeout,
                )
            if 200 <= response.status_code < 300:
                logger.info("Face recognition data accepted for %s", user_name)
                return True
            logger.warning("Face recognition API returned %s for %s", response.status_code, user_name)
            return False
        except Exception:
            logger.exception("Failed to send face recognition data for %s", user_name)
            return False
