"""Archive cache bookkeeping, streamed downloads and extraction for the raw corpus."""

from __future__ import annotations

import hashlib
import json
import os
import tarfile
import tempfile
import zipfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import requests
from tqdm import tqdm

RECORD_SUFFIX = ".meta.json"


@dataclass(frozen=True)
class ArchiveRecord:
    """Checksum and source URL of the last archive fetched into the cache."""

    sha256: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def load(cls, path: Path) -> "ArchiveRecord":
        """Read the sidecar; a missing or corrupt file yields an empty record."""
        if not path.exists():
            return cls()
        try:
            payload = json.loads(path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(payload, dict):
            return cls()
        return cls(sha256=payload.get("sha256"), url=payload.get("url"))

    def save(self, path: Path) -> None:
        path.write_text(json.dumps(asdict(self), indent=2, sort_keys=True))


def record_path(archive: Path) -> Path:
    """Sidecar location for ``archive`` (``corpus.tar.gz`` -> ``corpus.tar.gz.meta.json``)."""
    return archive.with_name(archive.name + RECORD_SUFFIX)


def sha256sum(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def archive_is_current(archive: Path, record: ArchiveRecord, url: str) -> bool:
    """True when ``archive`` exists, came from ``url`` and still matches its recorded checksum."""
    if not archive.exists() or record.url != url:
        return False
    if record.sha256 is None:
        return True
    return sha256sum(archive) == record.sha256


def download_stream(url: str, dest: Path, timeout: int = 60) -> None:
    """Stream ``url`` into ``dest``; the target is only replaced once the transfer completed."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        total = int(response.headers.get("content-length", 0)) or None
        with tempfile.NamedTemporaryFile(delete=False, dir=dest.parent) as tmp, tqdm(
            total=total, unit="B", unit_scale=True, desc=dest.name, leave=False
        ) as progress:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    tmp.write(chunk)
                    progress.update(len(chunk))
    os.replace(tmp.name, dest)


def extract_archive(archive: Path, target_dir: Path) -> None:
    """Unpack a zip or tar archive into ``target_dir``."""
    target_dir.mkdir(parents=True, exist_ok=True)
    if zipfile.is_zipfile(archive):
        with zipfile.ZipFile(archive) as zipped:
            zipped.extractall(target_dir)
    elif tarfile.is_tarfile(archive):
        with tarfile.open(archive) as tarred:
            tarred.extractall(target_dir, filter="data")
    else:
        raise ValueError(f"Unsupported archive format: {archive} (expected zip or tar)")


__all__ = [
    "ArchiveRecord",
    "RECORD_SUFFIX",
    "archive_is_current",
    "download_stream",
    "extract_archive",
    "record_path",
    "sha256sum",
]
