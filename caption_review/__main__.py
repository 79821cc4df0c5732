"""Package entry point for ``python -m caption_review``.

WHY: Users run the formatter as ``python -m caption_review newline tokens.json``
without installing the console script.

HOW: Delegates to the CLI's main() function.
"""

from caption_review.cli import main

if __name__ == "__main__":
    main()
