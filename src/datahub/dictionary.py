"""Data dictionaries written next to every derived table."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

import pandas as pd

DICTIONARY_SUFFIX = "_data_dictionary.csv"

CURATED_DESCRIPTIONS: Mapping[str, str] = {
    "session_id": "Parliamentary session identifier (ep-YY-MM-DD).",
    "speaker_id": "Identifier of the member of parliament speaking.",
    "state": "Member state the speaker represents.",
    "session_seq": "Position of the speaker turn within the session.",
    "text": "Tokenised transcript line.",
    "type": "Document type: native, non-native or translation.",
}

ANNOTATION_DESCRIPTIONS: Mapping[str, str] = {
    "doc_id": "Transcript line identifier within the subset.",
    "sentence_id": "Sentence index within the transcript line (1-based).",
    "sentence": "Full text of the sentence the token belongs to.",
    "token_id": "Token index within the sentence (1-based).",
    "token": "Surface form of the token.",
    "dep_rel": "Universal Dependencies relation of the token to its head.",
}

COMPLEXITY_DESCRIPTIONS: Mapping[str, str] = {
    "doc_id": "Unique sentence identifier across all subsets.",
    "type": "Document type: native, non-native or translation.",
    "t_units": "Main clauses (root, cop) plus subordinate clauses (ccomp, xcomp, acl:relcl).",
    "word_len": "Number of tokens in the sentence.",
    "text": "Sentence text.",
}


def dictionary_path(table_path: Path) -> Path:
    return table_path.with_name(table_path.stem + DICTIONARY_SUFFIX)


def build_data_dictionary(frame: pd.DataFrame, descriptions: Optional[Mapping[str, str]] = None) -> pd.DataFrame:
    """Describe each column of ``frame`` by name, inferred type and description."""
    descriptions = descriptions or {}
    rows = []
    for column in frame.columns:
        rows.append(
            {
                "variable": column,
                "name": column.replace("_", " ").title(),
                "type": _variable_type(frame[column]),
                "description": descriptions.get(column, ""),
            }
        )
    return pd.DataFrame(rows, columns=["variable", "name", "type", "description"])


def write_table(frame: pd.DataFrame, path: Path, descriptions: Optional[Mapping[str, str]] = None) -> Path:
    """Persist ``frame`` as CSV together with its data dictionary."""
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    build_data_dictionary(frame, descriptions).to_csv(dictionary_path(path), index=False)
    return path


def _variable_type(series: pd.Series) -> str:
    if pd.api.types.is_bool_dtype(series):
        return "logical"
    if pd.api.types.is_integer_dtype(series):
        return "integer"
    if pd.api.types.is_float_dtype(series):
        return "numeric"
    if isinstance(series.dtype, pd.CategoricalDtype):
        return "categorical"
    return "character"


__all__ = [
    "ANNOTATION_DESCRIPTIONS",
    "COMPLEXITY_DESCRIPTIONS",
    "CURATED_DESCRIPTIONS",
    "build_data_dictionary",
    "dictionary_path",
    "write_table",
]
