"""Command-line interface for the caption review formatter.

WHY: Batch jobs and debugging sessions need the same formatting the
editor gets over HTTP without running a server: wrap a token file and
write an .srt, or annotate a recognized sentence and inspect the runs.

HOW: argparse with three subcommands:
  newline - read a JSON token list, print the newline response JSON,
            optionally write the subtitle text to --srt
  sound   - read a JSON {input, output, response} request, print the
            sound response JSON
  serve   - run the HTTP API with uvicorn
Input paths of "-" read stdin. Status messages go to stderr.

RULES:
- Response JSON goes to stdout (pipeable), status to stderr
- --char-width swaps the Pillow measurer for a fixed-width stub
- Errors print "Error: ..." to stderr and exit with status 1
- Python 3.9 compatible - no match/case, no X | Y unions, no slots=True
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from caption_review.adapters.pillow_measure import MeasurementUnavailableError
from caption_review.config import DEFAULT_FONT, LOG_LEVEL
from caption_review.core.operations import (
    RequestFormatError,
    run_format_newline,
    run_format_sound,
)
from format_lines import FixedWidthMeasurer

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _read_json(path: str) -> Any:
    """Read and decode JSON from a file path, or stdin when path is "-".

    Raises:
        RequestFormatError: If the content is not valid JSON.
    """
    if path == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(path).read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RequestFormatError("Invalid JSON in {}: {}".format(path, exc)) from exc


def _emit(result: Any) -> None:
    json.dump(result, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _cmd_newline(args: argparse.Namespace) -> None:
    tokens = _read_json(args.tokens)
    port = None
    if args.char_width is not None:
        port = FixedWidthMeasurer(args.char_width)

    result = run_format_newline(tokens, font=args.font, max_width=args.max_width, port=port)
    _status("Wrapped into {} line(s)".format(len(result["lines"])))
    for error in result["errors"]:
        _status("  Warning: {}".format(error))

    if args.srt:
        srt_path = Path(args.srt)
        srt_path.write_text(result["subtitle"], encoding="utf-8")
        _status("Saved: {}".format(srt_path))

    _emit(result)


def _cmd_sound(args: argparse.Namespace) -> None:
    payload = _read_json(args.request)
    result = run_format_sound(payload)
    _status("Annotated {} input run(s), {} output run(s)".format(
        len(result["input"]), len(result["output"]),
    ))
    _emit(result)


def _cmd_serve(args: argparse.Namespace) -> None:
    from caption_review.server.app import run_api

    run_api()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable - tests can inspect the parser without running anything.
    """
    parser = argparse.ArgumentParser(
        prog="caption-review",
        description="Wrap caption tokens into subtitle lines and mark unknown words.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    newline = subparsers.add_parser(
        "newline",
        help="Wrap a JSON token list and render subtitles.",
    )
    newline.add_argument(
        "tokens",
        help="Path to a JSON list of token strings ('-' for stdin).",
    )
    newline.add_argument(
        "--font",
        default=DEFAULT_FONT,
        help="CSS font shorthand used for measuring (default: %(default)s).",
    )
    newline.add_argument(
        "--max-width",
        type=int,
        default=None,
        help="Maximum line width in pixels (default: CAPTION_MAX_WIDTH).",
    )
    newline.add_argument(
        "--srt",
        default=None,
        help="Also write the subtitle text to this file.",
    )
    newline.add_argument(
        "--char-width",
        type=float,
        default=None,
        help="Measure every character as this many pixels instead of using a font.",
    )
    newline.set_defaults(handler=_cmd_newline)

    sound = subparsers.add_parser(
        "sound",
        help="Mark unknown words in an {input, output, response} request.",
    )
    sound.add_argument(
        "request",
        help="Path to the JSON request ('-' for stdin).",
    )
    sound.set_defaults(handler=_cmd_sound)

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.set_defaults(handler=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        args.handler(args)
    except (RequestFormatError, MeasurementUnavailableError, ValueError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
