"""Caption Review - line wrapping and annotation service for caption editing.

WHY: Reviewers correct machine-generated captions and translations in a
rich-text editor. The editor needs subtitle lines that fit the player,
timed cues, and marks on unknown words and overlong lines. This package
hosts the format_lines library behind an HTTP API and a CLI.

HOW: Three layers - adapters (Pillow width measurement), core (request
deserialization and response validation around format_lines), and the
outer surfaces (FastAPI server, argparse CLI).

RULES:
- All algorithmic decisions live in format_lines; this package only
  deserializes, measures, validates and serializes.
- Wire field names are a compatibility contract; never rename them.
"""

__version__ = "0.1.0"
