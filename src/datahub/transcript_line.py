from dataclasses import dataclass


@dataclass(frozen=True)
class TranscriptLine:
    """Unified record describing a single line of a parliamentary transcript."""

    session_id: str
    speaker_id: str
    state: str
    session_seq: str
    text: str
    type: str
