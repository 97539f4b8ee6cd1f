"""
Parser utilities for the annotated-line (``.dat``) and token (``.tok``) corpus files.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Tuple

from .config import LINE_ATTRIBUTES, stem_for
from .transcript_line import TranscriptLine

_ATTRIBUTE_RE = re.compile(r'([A-Za-z_][\w\-]*)="([^"]*)"')


def locate_subset_files(root: Path, document_type: str) -> Tuple[Path, Path]:
    """Find the ``.dat``/``.tok`` pair for ``document_type`` anywhere below ``root``."""
    if not root.exists():
        raise FileNotFoundError(
            f"Missing corpus directory at {root}. Run `python main.py datahub --url <archive>` to download it first."
        )
    stem = stem_for(document_type)
    dat_matches = sorted(root.rglob(f"{stem}.dat"))
    if not dat_matches:
        raise FileNotFoundError(f"No '{stem}.dat' found under {root}")
    dat_path = dat_matches[0]
    tok_path = dat_path.with_suffix(".tok")
    if not tok_path.exists():
        raise FileNotFoundError(f"Annotated-line file {dat_path} has no matching token file {tok_path}")
    return dat_path, tok_path


def parse_line_attributes(line: str) -> Dict[str, str]:
    """Return the attributes of a ``<LINE .../>`` element keyed by upper-cased name."""
    stripped = line.strip()
    if not stripped.startswith("<LINE"):
        raise ValueError(f"Expected a <LINE .../> element, got {stripped[:60]!r}")
    return {name.upper(): value for name, value in _ATTRIBUTE_RE.findall(stripped)}


def _resolve_attribute(attributes: Mapping[str, str], column: str) -> str:
    for name in LINE_ATTRIBUTES[column]:
        if name in attributes:
            return attributes[name].strip()
    return ""


def iter_transcript_lines(dat_path: Path, tok_path: Path, document_type: str) -> Iterator[TranscriptLine]:
    """Zip annotated lines with their token lines into TranscriptLine records."""
    dat_lines = _read_nonblank(dat_path)
    tok_lines = _read_nonblank(tok_path, keep_blank=True)
    if len(dat_lines) != len(tok_lines):
        raise ValueError(
            f"{dat_path.name} has {len(dat_lines)} lines but {tok_path.name} has {len(tok_lines)}; files are misaligned."
        )

    for line_no, (meta_line, text) in enumerate(zip(dat_lines, tok_lines), start=1):
        try:
            attributes = parse_line_attributes(meta_line)
        except ValueError as exc:
            raise ValueError(f"{dat_path.name}:{line_no}: {exc}") from exc
        yield TranscriptLine(
            session_id=_resolve_attribute(attributes, "session_id"),
            speaker_id=_resolve_attribute(attributes, "speaker_id"),
            state=_resolve_attribute(attributes, "state"),
            session_seq=_resolve_attribute(attributes, "session_seq"),
            text=text.strip(),
            type=document_type,
        )


def collect_subset_rows(root: Path, document_type: str) -> List[TranscriptLine]:
    """Parse every transcript line of one corpus subset."""
    dat_path, tok_path = locate_subset_files(root, document_type)
    return list(iter_transcript_lines(dat_path, tok_path, document_type))


# ---------------------------------------------------------------------------
# Internal helpers


def _read_nonblank(path: Path, keep_blank: bool = False) -> List[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    if keep_blank:
        # Token files may end with a trailing newline only; interior blanks are real lines.
        while lines and not lines[-1].strip():
            lines.pop()
        return lines
    return [line for line in lines if line.strip()]
