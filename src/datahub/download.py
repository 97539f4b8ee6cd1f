"""Download helper for the parliamentary transcript corpus."""

from __future__ import annotations

from pathlib import Path

from .config import ENNTT
from .io import ArchiveRecord, archive_is_current, download_stream, extract_archive, record_path, sha256sum


def download_corpus(raw_root: Path, url: str, force: bool = False) -> Path:
    """
    Fetch the corpus archive from ``url`` and extract it locally.

    Parameters
    ----------
    raw_root:
        Directory used to store raw corpora (default: ``data/raw``).
    url:
        Location of a zip or tar archive containing the ``.dat``/``.tok`` pairs.
    force:
        If True, redownload the archive even when the cached copy is current.

    Returns
    -------
    Path
        Directory where the archive was unpacked.
    """
    archive = raw_root / ENNTT["archive_name"]
    target = raw_root / ENNTT["folder_name"]
    raw_root.mkdir(parents=True, exist_ok=True)

    sidecar = record_path(archive)
    if force or not archive_is_current(archive, ArchiveRecord.load(sidecar), url):
        print(f"[datahub] Downloading corpus from {url}")
        download_stream(url, archive)
        ArchiveRecord(sha256=sha256sum(archive), url=url).save(sidecar)
    else:
        print("[datahub] Corpus archive present; skipping download.")

    print(f"[datahub] Unpacking corpus into {target}")
    extract_archive(archive, target)
    return target


__all__ = ["download_corpus"]
