"""
MIME type detection for downloaded attachments.

Priority: the type the channel supplied, then the file extension, then the
content itself.
"""

import mimetypes
import os
from typing import Optional

import filetype

DEFAULT_MIME_TYPE = "application/octet-stream"


def detect_mime_type(explicit: Optional[str], file_path: str, data: bytes) -> str:
    if explicit and explicit.strip():
        return explicit.strip()

    if file_path:
        extension = os.path.splitext(file_path)[1].lower()
        if extension:
            guessed, _ = mimetypes.guess_type(f"file{extension}")
            if guessed:
                return guessed

    kind = filetype.guess(data)
    if kind is not None:
        return kind.mime
    return DEFAULT_MIME_TYPE
