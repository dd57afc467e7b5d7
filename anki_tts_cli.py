"""Command-line entrypoint: paste flashcards on stdin, get an Anki import file back.

Example::

    printf 'cat;gato\\ndog;perro\\n' | anki-tts --delimiter ';' --side front --lang en
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from config.settings import (
    ANKI_PROFILE,
    DEFAULT_DELIMITER,
    DEFAULT_TTS_SIDE,
    LOG_FORMAT,
    MESSAGES,
    OUTPUT_FILE_PATH,
    TTS_MAX_WORKERS,
    TTS_REQUEST_TIMEOUT,
    get_delimiter_choices,
)
from core.errors import BuilderError
from core.flashcards import BuildOptions, build_flashcards
from core.media import resolve_media_dir
from core.parsing import Row, decode_text

logger = logging.getLogger("anki_tts")

_DELIMITER_CHOICES = get_delimiter_choices() + ["tab", "space"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anki-tts",
        description="Add Google TTS audio to a two-column flashcard list for Anki import.",
    )
    parser.add_argument(
        "--delimiter",
        "-d",
        default=DEFAULT_DELIMITER,
        choices=_DELIMITER_CHOICES,
        help="Column separator (default: %(default)s)",
    )
    parser.add_argument(
        "--side",
        "-s",
        default=DEFAULT_TTS_SIDE.lower(),
        choices=["front", "back"],
        help="Column to read aloud; it becomes the front of the card (default: %(default)s)",
    )
    parser.add_argument("--lang", "-l", default="", help="TTS language code, e.g. en")
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        default=None,
        help="Read flashcards from this file instead of stdin",
    )
    parser.add_argument("--media-dir", type=Path, default=None, help="Anki collection.media folder")
    parser.add_argument("--profile", default=ANKI_PROFILE, help="Anki profile name (default: %(default)s)")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path(OUTPUT_FILE_PATH),
        help="Output file (default: %(default)s)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=TTS_MAX_WORKERS,
        help="Parallel TTS requests, 0 = one per CPU (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=TTS_REQUEST_TIMEOUT,
        help="Per-request timeout in seconds (default: %(default)s)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def _read_input(source: Optional[Path], stdin: TextIO) -> str:
    if source is not None:
        return decode_text(source.read_bytes())
    if stdin.isatty():
        print(MESSAGES["paste_prompt"], file=sys.stderr)
    buffer = getattr(stdin, "buffer", None)
    if buffer is not None:
        return decode_text(buffer.read())
    return stdin.read()


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s" if not args.verbose else LOG_FORMAT,
        stream=sys.stderr,
    )
    if args.workers < 0:
        logger.error("--workers must be >= 0")
        return 1
    if args.timeout <= 0:
        logger.error(MESSAGES["bad_timeout"])
        return 1

    def _announce(_idx: int, row: Row) -> None:
        logger.info(
            MESSAGES["processing_fmt"].format(front=row.side_a, separator=args.delimiter, back=row.side_b)
        )

    try:
        raw_text = _read_input(args.input, stdin or sys.stdin)
        media_dir = args.media_dir or resolve_media_dir(args.profile)
        options = BuildOptions(
            separator=args.delimiter,
            language_code=args.lang,
            media_dir=media_dir,
            tts_front=args.side == "front",
            output_path=args.output,
            max_workers=args.workers,
            timeout=args.timeout,
        )
        result = build_flashcards(raw_text, options, on_admit=_announce)
    except BuilderError as err:
        logger.error("%s", err)
        return 1
    except OSError as err:
        logger.error("Failed to read input: %s", err)
        return 1

    logger.info(MESSAGES["done"])
    logger.info(MESSAGES["import_hint_fmt"].format(path=result.output_path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
