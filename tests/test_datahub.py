"""Tests for the datahub parser, curation, loader, and download helpers."""

from __future__ import annotations

import io
import tarfile
import zipfile
from pathlib import Path

import sys

import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.datahub import download as download_module
from src.datahub.config import CURATED_COLUMNS
from src.datahub.curate import curate_corpus, curate_subset, curated_path
from src.datahub.dictionary import build_data_dictionary, dictionary_path
from src.datahub.helpers import require_columns, to_int
from src.datahub.io import ArchiveRecord, archive_is_current, extract_archive, record_path, sha256sum
from src.datahub.loader import load_curated
from src.datahub.parser import iter_transcript_lines, locate_subset_files, parse_line_attributes
from src.datahub.pipeline import DataRequest, prepare_corpus


# ---------------------------------------------------------------------------
# Helper fixtures and utilities

NATIVE_DAT = """<LINE STATE="United Kingdom" SESSION_ID="ep-05-11-16" SPEAKER_ID="2309" SEQ_SPEAKER_ID="12"/>
<LINE STATE="Ireland" SESSION_ID="ep-05-11-16" SPEAKER_ID="4561" SEQ_SPEAKER_ID="13"/>
"""
NATIVE_TOK = """I think that the proposal is sound .
We must act now .
"""
TRANSLATION_DAT = """<LINE STATE="Germany" SESSION_ID="ep-06-01-18" MEPID="96779" SEQ_SPEAKER_ID="4"/>
"""
TRANSLATION_TOK = """The Commission has said that it will act .
"""


def _write_corpus(tmp_path: Path, nested: str = "ENNTT") -> Path:
    raw_root = tmp_path / "raw"
    corpus_dir = raw_root / "enntt" / nested
    corpus_dir.mkdir(parents=True, exist_ok=True)
    (corpus_dir / "natives.dat").write_text(NATIVE_DAT, encoding="utf-8")
    (corpus_dir / "natives.tok").write_text(NATIVE_TOK, encoding="utf-8")
    (corpus_dir / "translations.dat").write_text(TRANSLATION_DAT, encoding="utf-8")
    (corpus_dir / "translations.tok").write_text(TRANSLATION_TOK, encoding="utf-8")
    (corpus_dir / "nonnatives.dat").write_text(TRANSLATION_DAT, encoding="utf-8")
    (corpus_dir / "nonnatives.tok").write_text("We are agree with this .\n", encoding="utf-8")
    return raw_root


# ---------------------------------------------------------------------------
# Parser tests


def test_parse_line_attributes_reads_every_attribute() -> None:
    attributes = parse_line_attributes('<LINE STATE="Malta" session_id="ep-00-01-17" SPEAKER_ID="7"/>')
    assert attributes == {"STATE": "Malta", "SESSION_ID": "ep-00-01-17", "SPEAKER_ID": "7"}


def test_parse_line_attributes_rejects_other_markup() -> None:
    with pytest.raises(ValueError):
        parse_line_attributes("<SPEAKER ID='1'>")


def test_iter_transcript_lines_maps_columns(tmp_path: Path) -> None:
    raw_root = _write_corpus(tmp_path)
    dat_path, tok_path = locate_subset_files(raw_root / "enntt", "translation")

    lines = list(iter_transcript_lines(dat_path, tok_path, "translation"))

    assert len(lines) == 1
    line = lines[0]
    assert line.session_id == "ep-06-01-18"
    assert line.speaker_id == "96779"  # MEPID fallback
    assert line.state == "Germany"
    assert line.session_seq == "4"
    assert line.text == "The Commission has said that it will act ."
    assert line.type == "translation"


def test_iter_transcript_lines_detects_misalignment(tmp_path: Path) -> None:
    dat_path = tmp_path / "natives.dat"
    tok_path = tmp_path / "natives.tok"
    dat_path.write_text(NATIVE_DAT, encoding="utf-8")
    tok_path.write_text("Only one line .\n", encoding="utf-8")
    with pytest.raises(ValueError, match="misaligned"):
        list(iter_transcript_lines(dat_path, tok_path, "native"))


def test_locate_subset_files_requires_corpus(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        locate_subset_files(tmp_path / "missing", "native")
    (tmp_path / "empty").mkdir()
    with pytest.raises(FileNotFoundError):
        locate_subset_files(tmp_path / "empty", "native")


# ---------------------------------------------------------------------------
# Curation and loader tests


def test_curate_subset_writes_table_and_dictionary(tmp_path: Path) -> None:
    raw_root = _write_corpus(tmp_path)
    derived_root = tmp_path / "derived"

    frame = curate_subset("native", raw_root=raw_root, derived_root=derived_root)

    assert list(frame.columns) == list(CURATED_COLUMNS)
    assert len(frame) == 2
    assert set(frame["type"]) == {"native"}

    target = curated_path(derived_root, "native")
    assert target.name == "natives.csv"
    assert target.exists()
    dictionary = pd.read_csv(dictionary_path(target))
    assert list(dictionary["variable"]) == list(CURATED_COLUMNS)
    assert dictionary["description"].notna().all()


def test_load_curated_round_trips_strings(tmp_path: Path) -> None:
    raw_root = _write_corpus(tmp_path)
    derived_root = tmp_path / "derived"
    curate_subset("native", raw_root=raw_root, derived_root=derived_root)

    loaded = load_curated("native", root=derived_root)

    assert loaded.loc[0, "speaker_id"] == "2309"
    assert loaded.loc[1, "text"] == "We must act now ."


def test_load_curated_missing_table(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_curated("translation", root=tmp_path)


def test_curate_corpus_validates_and_deduplicates(tmp_path: Path) -> None:
    raw_root = _write_corpus(tmp_path)
    derived_root = tmp_path / "derived"

    curated = curate_corpus(raw_root=raw_root, derived_root=derived_root, document_types=["translation", "translation"])
    assert list(curated) == ["translation"]

    with pytest.raises(ValueError):
        curate_corpus(raw_root=raw_root, derived_root=derived_root, document_types=["learner"])


def test_data_request_from_flags() -> None:
    request = DataRequest.from_flags(url=None, subsets=[])
    assert request.document_types == ("native", "non-native", "translation")
    assert DataRequest.from_flags(url="x", subsets=["native"]).document_types == ("native",)
    with pytest.raises(ValueError):
        DataRequest.from_flags(url=None, subsets=["learner"])


def test_prepare_corpus_without_url_curates_local_files(tmp_path: Path) -> None:
    raw_root = _write_corpus(tmp_path)
    curated = prepare_corpus(DataRequest(url=None), raw_root=raw_root, derived_root=tmp_path / "derived")
    assert sorted(curated) == ["native", "non-native", "translation"]
    assert len(curated["non-native"]) == 1


# ---------------------------------------------------------------------------
# Helper and dictionary tests


def test_to_int_accepts_multiple_types() -> None:
    assert to_int(3) == 3
    assert to_int(True) == 1
    assert to_int("7") == 7
    with pytest.raises(ValueError):
        to_int(None)
    with pytest.raises(ValueError):
        to_int("seven")


def test_require_columns_names_missing() -> None:
    with pytest.raises(ValueError, match="text"):
        require_columns(pd.DataFrame({"doc_id": [1]}), ("doc_id", "text"))


def test_build_data_dictionary_infers_types() -> None:
    frame = pd.DataFrame({"doc_id": [1, 2], "ratio": [0.5, 0.2], "text": ["a", "b"]})
    dictionary = build_data_dictionary(frame, {"doc_id": "Identifier."})
    assert list(dictionary["type"]) == ["integer", "numeric", "character"]
    assert dictionary.loc[0, "description"] == "Identifier."
    assert dictionary.loc[1, "name"] == "Ratio"


# ---------------------------------------------------------------------------
# Download cache tests


def test_archive_record_tracks_url_and_checksum(tmp_path: Path) -> None:
    url = "https://example.org/corpus.tar.gz"
    archive = tmp_path / "corpus.tar.gz"
    assert archive_is_current(archive, ArchiveRecord(), url) is False

    archive.write_bytes(b"payload")
    record = ArchiveRecord(sha256=sha256sum(archive), url=url)
    assert archive_is_current(archive, record, url) is True
    assert archive_is_current(archive, record, "https://example.org/other.zip") is False
    assert archive_is_current(archive, ArchiveRecord(sha256="0" * 64, url=url), url) is False

    sidecar = record_path(archive)
    assert sidecar.name == "corpus.tar.gz.meta.json"
    record.save(sidecar)
    assert ArchiveRecord.load(sidecar) == record

    sidecar.write_text("{not json")
    assert ArchiveRecord.load(sidecar) == ArchiveRecord()


def test_extract_archive_handles_zip_and_tar(tmp_path: Path) -> None:
    zipped = tmp_path / "corpus.zip"
    with zipfile.ZipFile(zipped, "w") as handle:
        handle.writestr("ENNTT/natives.tok", "zip line\n")
    extract_archive(zipped, tmp_path / "from_zip")
    assert (tmp_path / "from_zip" / "ENNTT" / "natives.tok").read_text() == "zip line\n"

    tarred = tmp_path / "corpus.tar.gz"
    payload = b"tar line\n"
    with tarfile.open(tarred, "w:gz") as handle:
        info = tarfile.TarInfo("ENNTT/natives.tok")
        info.size = len(payload)
        handle.addfile(info, io.BytesIO(payload))
    extract_archive(tarred, tmp_path / "from_tar")
    assert (tmp_path / "from_tar" / "ENNTT" / "natives.tok").read_bytes() == payload

    bogus = tmp_path / "corpus.bin"
    bogus.write_bytes(b"nothing to see")
    with pytest.raises(ValueError):
        extract_archive(bogus, tmp_path / "bogus")


def test_download_corpus_skips_cached_archive(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    def fake_download(url: str, dest: Path) -> None:
        calls.append(url)
        with zipfile.ZipFile(dest, "w") as handle:
            handle.writestr("ENNTT/natives.dat", NATIVE_DAT)
            handle.writestr("ENNTT/natives.tok", NATIVE_TOK)

    monkeypatch.setattr(download_module, "download_stream", fake_download)
    raw_root = tmp_path / "raw"

    target = download_module.download_corpus(raw_root, "https://example.org/corpus.zip")
    assert (target / "ENNTT" / "natives.dat").exists()
    download_module.download_corpus(raw_root, "https://example.org/corpus.zip")
    assert calls == ["https://example.org/corpus.zip"]

    download_module.download_corpus(raw_root, "https://example.org/corpus.zip", force=True)
    assert len(calls) == 2
