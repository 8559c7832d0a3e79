"""Transient on-disk staging of uploaded report files"""

import logging
import os
import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Protocol

from creditsea_gateway.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

XML_CONTENT_TYPES = {"text/xml", "application/xml"}
XML_EXTENSION = ".xml"

_UNSAFE_TOKEN_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class UploadStream(Protocol):
    """What staging needs from an uploaded file (satisfied by FastAPI's UploadFile)"""

    filename: Optional[str]

    async def read(self, size: int = -1) -> bytes: ...


def is_xml_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    """Accept by extension or by declared content type"""
    if filename and filename.lower().endswith(XML_EXTENSION):
        return True
    if content_type:
        return content_type.split(";", 1)[0].strip().lower() in XML_CONTENT_TYPES
    return False


class StagingArea:
    """Directory holding uploads while they are being processed"""

    def __init__(self, directory: str, max_bytes: int, chunk_bytes: int = 64 * 1024):
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.chunk_bytes = chunk_bytes

    def staging_path(self, original_name: Optional[str], token: str) -> Path:
        """Staging file path derived from the caller's token, never from shared state"""
        extension = os.path.splitext(os.path.basename(original_name or ""))[1].lower()
        if not re.fullmatch(r"\.[a-z0-9]{1,8}", extension):
            extension = XML_EXTENSION
        safe_token = _UNSAFE_TOKEN_CHARS.sub("", token) or "upload"
        return self.directory / f"credit-report-{safe_token}{extension}"

    @asynccontextmanager
    async def stage(self, upload: UploadStream, token: str) -> AsyncIterator[Path]:
        """
        Copy an upload into the staging directory and yield its path.

        The file is removed when the block exits, whether it completes, raises,
        or is cancelled.

        Raises:
            ValidationError: If the upload exceeds `max_bytes`
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.staging_path(upload.filename, token)
        try:
            written = 0
            with open(path, "wb") as staged:
                while True:
                    chunk = await upload.read(self.chunk_bytes)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise ValidationError(f"File exceeds the {self.max_bytes} byte limit")
                    staged.write(chunk)
            logger.debug("Upload staged", extra={"path": str(path), "bytes": written})
            yield path
        finally:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error(f"Failed to remove staging file {path}: {e}")
