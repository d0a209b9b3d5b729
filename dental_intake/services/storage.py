"""Disk storage for second-opinion radiographs.

Each request gets its own folder under UPLOAD_ROOT; files are renamed to a
random hex name so client file names never touch the filesystem.
"""
from __future__ import annotations

import mimetypes
import os
import uuid
from pathlib import Path
from typing import Optional, Tuple

DEFAULT_UPLOAD_DIR = Path(
    os.getenv("UPLOAD_ROOT")
    or (Path(__file__).resolve().parent.parent / "uploads")
)
MAX_SUFFIX_LEN = 10


def _ensure_upload_dir(subdir: Optional[str] = None) -> Path:
    # only the last component is used, so "../x" cannot escape the root
    folder = Path(subdir).name if subdir else ""
    upload_dir = DEFAULT_UPLOAD_DIR / folder if folder else DEFAULT_UPLOAD_DIR
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def file_suffix(original_name: Optional[str], content_type: Optional[str] = None) -> str:
    suffix = Path(original_name or "").suffix.lower()
    if not suffix and content_type:
        suffix = mimetypes.guess_extension(content_type.split(";")[0].strip()) or ""
    return suffix if len(suffix) <= MAX_SUFFIX_LEN else ""


def store_local_upload(
    data: bytes,
    original_name: Optional[str],
    subdir: Optional[str] = None,
    content_type: Optional[str] = None,
) -> Tuple[str, str]:
    """Persist the raw upload to disk and return (path, filename)."""
    upload_dir = _ensure_upload_dir(subdir)
    filename = f"{uuid.uuid4().hex}{file_suffix(original_name, content_type)}"
    path = upload_dir / filename
    path.write_bytes(data)
    return str(path), filename


__all__ = ["store_local_upload", "file_suffix", "DEFAULT_UPLOAD_DIR"]
