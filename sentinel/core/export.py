"""ZIP archive of student photos."""

import io
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)

ARCHIVE_FOLDER = "student-photos"
DEFAULT_EXTENSION = "jpg"


@dataclass
class PhotoArchive:
    """Built archive and how many photos made it in."""
    content: bytes
    added: int
    skipped: int


def clean_name(name: str) -> str:
    """Replace every non-alphanumeric character with an underscore."""
    return re.sub(r"[^a-zA-Z0-9]", "_", name)


def photo_extension(url: str) -> str:
    """Extension taken from the last dot-separated segment of the URL path."""
    path = urlparse(url).path
    if "." not in path.rsplit("/", 1)[-1]:
        return DEFAULT_EXTENSION
    return path.rsplit(".", 1)[-1] or DEFAULT_EXTENSION


def archive_filename(today: Optional[date] = None) -> str:
    return f"student-photos-{(today or date.today()).isoformat()}.zip"


def fetch_photo(url: str, timeout: float) -> bytes:
    """Download one photo; raises ``requests.RequestException`` on failure."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


def build_photo_archive(students: Iterable, timeout: float = 10.0) -> PhotoArchive:
    """
    Fetch each student's photo in turn and write it into a ZIP.

    Entries are named ``student-photos/<student_id>_<clean name>.<ext>``.
    Photos that fail to download are logged and left out.

    Blocking; callers on the event loop run it in a worker thread.
    """
    buffer = io.BytesIO()
    added = skipped = 0

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for student in students:
            try:
                content = fetch_photo(student.photo_url, timeout)
            except requests.RequestException as e:
                logger.warning("[EXPORT] Failed to download image for %s: %s", student.student_id, e)
                skipped += 1
                continue

            filename = (
                f"{student.student_id}_{clean_name(student.full_name)}"
                f".{photo_extension(student.photo_url)}"
            )
            archive.writestr(f"{ARCHIVE_FOLDER}/{filename}", content)
            added += 1

    logger.info("[EXPORT] Archived %d photos, skipped %d", added, skipped)
    return PhotoArchive(content=buffer.getvalue(), added=added, skipped=skipped)
