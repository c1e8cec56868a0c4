from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Literal, Optional


Depth = Literal["concise", "detailed"]
Language = Literal["english", "hinglish"]
Focus = Literal["exam", "concept"]
Status = Literal["idle", "processing", "success", "error"]

DEPTHS = ("concise", "detailed")
LANGUAGES = ("english", "hinglish")
FOCUSES = ("exam", "concept")


@dataclass(frozen=True)
class AnswerData:
    text: str
    model_used: str


@dataclass(frozen=True)
class HistoryItem:
    id: str
    file_name: str
    date: str
    data: AnswerData

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "HistoryItem":
        data = raw.get("data") or {}
        return cls(
            id=str(raw["id"]),
            file_name=str(raw.get("file_name", "")),
            date=str(raw.get("date", "")),
            data=AnswerData(text=str(data["text"]), model_used=str(data.get("model_used", ""))),
        )


@dataclass
class AppSettings:
    depth: Depth = "detailed"
    language: Language = "english"
    focus: Focus = "concept"

    def __post_init__(self) -> None:
        if self.depth not in DEPTHS:
            raise ValueError(f"depth must be one of {DEPTHS}, got {self.depth!r}")
        if self.language not in LANGUAGES:
            raise ValueError(f"language must be one of {LANGUAGES}, got {self.language!r}")
        if self.focus not in FOCUSES:
            raise ValueError(f"focus must be one of {FOCUSES}, got {self.focus!r}")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "AppSettings":
        """Build settings from stored values; anything outside the enumerations falls back to the default."""

        defaults = cls()
        depth = raw.get("depth") if raw.get("depth") in DEPTHS else defaults.depth
        language = raw.get("language") if raw.get("language") in LANGUAGES else defaults.language
        focus = raw.get("focus") if raw.get("focus") in FOCUSES else defaults.focus
        return cls(depth=depth, language=language, focus=focus)


@dataclass
class ProcessState:
    status: Status = "idle"
    message: Optional[str] = None


@dataclass(frozen=True)
class UploadedDocument:
    file_name: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)
