"""Range annotator: character ranges to rich-text delta runs.

WHY: The review editor shows machine output as a rich-text delta and needs
flagged spans ("unknown words") marked so the user can find and correct
them. Callers supply the flagged spans as character offsets into the raw
text; this module cuts the text into alternating plain and annotated runs.
The same run builders attach caution marks to overlong lines in the cue
sequencer.

HOW: A single read cursor walks the character sequence. For each range,
the characters between the cursor and range.start become a plain run and
the characters of the range become an annotated run carrying a fresh
identifier and the flagged word. The cursor then jumps to range.end.

RULES:
- Offsets are character offsets (str indices), never byte offsets.
- Ranges are expected ascending and non-overlapping. A range that starts
  before the cursor is logged and yields an empty plain run; it is not
  rejected.
- Text after the last range's end is NOT emitted.
- Taking past the end of the text stops silently with a shorter run.
- Identifiers only need to be unique within one response.
"""

import itertools
import logging
import uuid
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from .models import Attributes, Run, SoundDelta, WarningAttribute, WordRange

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def new_run_id() -> str:
    """Return a random RFC 4122 UUID v4 string."""
    return str(uuid.uuid4())


def take_chars(chars: Iterator[str], count: int) -> str:
    """Consume up to count characters from an iterator.

    Stops early when the iterator is exhausted. A zero or negative count
    consumes nothing.
    """
    if count <= 0:
        return ""
    return "".join(itertools.islice(chars, count))


def line_break_run() -> Run:
    """A bare newline run with no attributes (forced visual break)."""
    return Run(insert="\n")


def caution_run(text: str, caution: Optional[str]) -> Run:
    """A newline-terminated line run, cautioned when caution is set."""
    if caution is None:
        return Run(insert=text + "\n")
    return Run(insert=text + "\n", attributes=Attributes(caution=caution))


def annotate_ranges(
    text: str,
    ranges: Iterable[WordRange],
    id_factory: Optional[IdFactory] = None,
) -> List[Run]:
    """Split text into plain and annotated runs at the given ranges.

    WHY: The editor highlights each flagged word and links it back to a
    correction widget through the run's warning identifier.

    HOW: Emits, per range, a plain run for the gap before it and an
    annotated run for the range itself. Characters are consumed from one
    shared iterator so the cursor only moves forward.

    RULES:
    - Always two runs per range (the plain run may be empty).
    - The annotated run's warning carries uuid and unknown=range.word.
    - Nothing is emitted after the final range.

    Args:
        text: Source text.
        ranges: WordRanges sorted ascending by start.
        id_factory: Callable returning a new identifier per annotated run.
            Defaults to new_run_id().

    Returns:
        Ordered list of Run objects.
    """
    make_id = id_factory or new_run_id
    chars = iter(text)
    cursor = 0
    runs = []  # type: List[Run]

    for word_range in ranges:
        if word_range.start < cursor:
            logger.warning(
                "Range %r starts at %d before cursor %d (out of order or overlapping)",
                word_range.word, word_range.start, cursor,
            )
        runs.append(Run(insert=take_chars(chars, word_range.start - cursor)))
        runs.append(Run(
            insert=take_chars(chars, word_range.end - word_range.start),
            attributes=Attributes(
                warning=WarningAttribute(uuid=make_id(), unknown=word_range.word),
            ),
        ))
        cursor = word_range.end

    return runs


def annotate_pair(
    input_text: str,
    output_text: str,
    input_ranges: Sequence[WordRange],
    output_ranges: Sequence[WordRange],
    id_factory: Optional[IdFactory] = None,
) -> SoundDelta:
    """Annotate an (input, output) text pair independently.

    Used for a source text and its machine translation, each with its own
    flagged words.
    """
    input_runs = annotate_ranges(input_text, input_ranges, id_factory)
    output_runs = annotate_ranges(output_text, output_ranges, id_factory)
    logger.debug(
        "Annotated %d input and %d output ranges",
        len(input_ranges), len(output_ranges),
    )
    return SoundDelta(input=tuple(input_runs), output=tuple(output_runs))
