from __future__ import annotations

import io
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..common.validators import sanitize_name
from ..core.constants import ALLOWED_IMAGE_TYPES, DEFAULT_MAX_UPLOAD_BYTES
from ..core.exceptions import FieldError, StorageError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".jpg"


@dataclass(frozen=True)
class StoredEmployeeFiles:
    face_photo_path: str
    signature_path: Optional[str] = None


def is_empty_upload(upload: Optional[FileStorage]) -> bool:
    return upload is None or not (upload.filename or upload.content_length or _peek(upload))


def _peek(upload: FileStorage) -> bool:
    stream = upload.stream
    try:
        pos = stream.tell()
        chunk = stream.read(1)
        stream.seek(pos)
    except (AttributeError, OSError, ValueError):
        return True
    return bool(chunk)


def file_extension(filename: Optional[str]) -> str:
    if not filename:
        return DEFAULT_EXTENSION
    dot = filename.rfind(".")
    if 0 < dot < len(filename) - 1:
        return filename[dot:]
    return DEFAULT_EXTENSION


class FileStorageService:
    """Validate and persist uploaded images under a configured root.

    Employee files are partitioned per employee and day:
    ``{name}_{ddMMyyyy}/Face/{name}_photo.ext`` and ``.../Signature/...``.
    Attendance images are stored flat with a random prefix.
    """

    def __init__(
        self,
        base_path: str | Path,
        *,
        max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        today: Callable[[], date] = date.today,
    ):
        self._base = Path(base_path)
        self._max_bytes = int(max_bytes)
        self._today = today

    def store_employee_files(
        self,
        name: str,
        face_photo: Optional[FileStorage],
        signature: Optional[FileStorage] = None,
    ) -> StoredEmployeeFiles:
        face_bytes = self._validated_image(face_photo, "Face Photo", "uploadFacePhoto")
        sign_bytes = None
        if not is_empty_upload(signature):
            sign_bytes = self._validated_image(signature, "Signature", "uploadSignature")

        safe_name = sanitize_name(name)
        employee_dir = f"{safe_name}_{self._today().strftime('%d%m%Y')}"

        face_rel = f"{employee_dir}/Face/{safe_name}_photo{file_extension(face_photo.filename)}"
        self._write(face_rel, face_bytes)
        logger.info("Stored face photo for employee %s", name)

        sign_rel = None
        if sign_bytes is not None:
            sign_rel = f"{employee_dir}/Signature/{safe_name}_signature{file_extension(signature.filename)}"
            try:
                self._write(sign_rel, sign_bytes)
            except StorageError:
                self.discard(face_rel)
                raise
            logger.info("Stored signature for employee %s", name)

        return StoredEmployeeFiles(face_photo_path=face_rel, signature_path=sign_rel)

    def store_attendance_image(self, upload: Optional[FileStorage]) -> str:
        if is_empty_upload(upload):
            raise ValidationError("Image is required")
        data = upload.read()
        if not data:
            raise ValidationError("Image is required")
        if len(data) > self._max_bytes:
            raise ValidationError(f"Image size cannot exceed {self._max_bytes // (1024 * 1024)}MB")

        original = secure_filename(upload.filename or "")
        relative = f"{uuid.uuid4()}_{original}" if original else f"{uuid.uuid4()}{DEFAULT_EXTENSION}"
        self._write(relative, data)
        return relative

    def absolute_path(self, relative: str) -> Path:
        path = (self._base / relative).resolve()
        if self._base.resolve() not in path.parents and path != self._base.resolve():
            raise ValidationError("Invalid file path")
        return path

    def exists(self, relative: str) -> bool:
        try:
            return self.absolute_path(relative).is_file()
        except ValidationError:
            return False

    def discard(self, *relatives: Optional[str]) -> None:
        """Remove stored files whose database row was never written; missing files are ignored."""
        for relative in relatives:
            if not relative:
                continue
            try:
                self.absolute_path(relative).unlink(missing_ok=True)
            except (OSError, ValidationError):
                logger.warning("Could not remove orphaned upload %s", relative, exc_info=True)
            else:
                logger.info("Removed orphaned upload %s", relative)

    def _validated_image(self, upload: Optional[FileStorage], label: str, field: str) -> bytes:
        if is_empty_upload(upload):
            raise ValidationError(f"{label} is required", errors=[FieldError(field, f"{label} is required")])

        content_type = (upload.mimetype or upload.content_type or "").lower()
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError(
                f"{label} must be a JPEG or PNG image",
                errors=[FieldError(field, f"{label} must be a JPEG or PNG image")],
            )

        data = upload.read()
        if not data:
            raise ValidationError(f"{label} is required", errors=[FieldError(field, f"{label} is required")])
        if len(data) > self._max_bytes:
            limit_mb = self._max_bytes // (1024 * 1024)
            raise ValidationError(
                f"{label} size cannot exceed {limit_mb}MB",
                errors=[FieldError(field, f"{label} size cannot exceed {limit_mb}MB")],
            )

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise ValidationError(
                f"{label} is not a readable image",
                errors=[FieldError(field, f"{label} is not a readable image")],
            ) from exc
        return data

    def _write(self, relative: str, data: bytes) -> None:
        target = self._base / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"File upload failed: {exc.strerror or exc}") from exc
