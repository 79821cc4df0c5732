"""Data models for the line formatter.

WHY: The wrapping pipeline and the range annotator hand values to each other
and to the host application, which serializes them to a rich-text delta
(a list of runs) and a subtitle file. Typed dataclasses keep those values
explicit instead of passing loose dicts between stages.

HOW: WordRange/WarningRange describe flagged spans in a source string.
Run/Attributes/WarningAttribute form the delta that an editor renders.
Cue is one timed subtitle unit. NewlineResult and SoundDelta bundle the
results of the two public operations. Every serializable type has a
to_dict() that produces the wire shape, omitting unset optional keys.

RULES:
- All models are frozen value types; nothing mutates them after creation.
- Ranges are half-open character offsets [start, end).
- Runs concatenated in order reconstruct the source text.
- Python 3.9 compatible (no slots=True, no match/case, no X | Y unions).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


@dataclass(frozen=True)
class WordRange:
    """A flagged word inside a source string.

    Attributes:
        word: The flagged word, echoed into the annotated run.
        start: First character offset (inclusive).
        end: Last character offset (exclusive).
    """
    word: str
    start: int
    end: int


@dataclass(frozen=True)
class WarningRange:
    """A warning span with no associated word. Accepted, never consumed."""
    start: int
    end: int


@dataclass(frozen=True)
class WarningAttribute:
    """Marks a run as a flagged span that needs manual review.

    Attributes:
        uuid: Identifier distinguishing this run within one response.
        unknown: The flagged word, if any.
        num: Reserved counter slot; never set by this library.
    """
    uuid: str
    unknown: Optional[str] = None
    num: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"uuid": self.uuid}  # type: Dict[str, Any]
        if self.unknown is not None:
            data["unknown"] = self.unknown
        if self.num is not None:
            data["num"] = self.num
        return data


@dataclass(frozen=True)
class Attributes:
    warning: Optional[WarningAttribute] = None
    caution: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {}  # type: Dict[str, Any]
        if self.warning is not None:
            data["warning"] = self.warning.to_dict()
        if self.caution is not None:
            data["caution"] = self.caution
        return data


@dataclass(frozen=True)
class Run:
    """A contiguous text fragment with optional formatting attributes."""
    insert: str
    attributes: Optional[Attributes] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"insert": self.insert}  # type: Dict[str, Any]
        if self.attributes is not None:
            data["attributes"] = self.attributes.to_dict()
        return data


@dataclass(frozen=True)
class Cue:
    """One timed subtitle unit.

    Attributes:
        duration: Display time in seconds.
        text: Rendered cue text (bold-wrapped, one or two lines).
    """
    duration: float
    text: str


@dataclass(frozen=True)
class NewlineResult:
    """Everything produced by one wrapping pass.

    Attributes:
        lines: Display lines produced by the wrapper.
        runs: One newline-terminated run per line, plus forced break runs.
        errors: Distinct warning categories collected while sequencing.
        cues: Timed cues produced by the sequencer.
        subtitle: The rendered subtitle file text.
    """
    lines: Tuple[str, ...]
    runs: Tuple[Run, ...]
    errors: FrozenSet[str]
    cues: Tuple[Cue, ...]
    subtitle: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": list(self.lines),
            "input": [run.to_dict() for run in self.runs],
            "errors": sorted(self.errors),
            "subtitle": self.subtitle,
        }


@dataclass(frozen=True)
class SoundDelta:
    """Annotated runs for a paired (input, output) text."""
    input: Tuple[Run, ...] = field(default_factory=tuple)
    output: Tuple[Run, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "input": [run.to_dict() for run in self.input],
            "output": [run.to_dict() for run in self.output],
        }
