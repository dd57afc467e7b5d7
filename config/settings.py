"""
Configuration for Anki TTS Flashcards Builder
"""

import os

from typing import Dict, List, Tuple


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    try:
        return float(raw) if raw.strip() else default
    except ValueError:
        return default


# ==========================
# TTS endpoint
# ==========================

TTS_ENDPOINT: str = "https://translate.google.com/translate_tts"
# Fixed query parameters sent with every request; q/tl are added per row
TTS_STATIC_PARAMS: Dict[str, str] = {"ie": "UTF-8", "client": "tw-ob"}
AUDIO_EXTENSION: str = "mp3"

# Seconds; applied to each request separately
TTS_REQUEST_TIMEOUT: float = _env_float("TTS_REQUEST_TIMEOUT", 30.0)

# Bounded concurrency for the fetch pipeline (0 = one per CPU)
TTS_MAX_WORKERS: int = _env_int("TTS_MAX_WORKERS", 0)

DEFAULT_LANGUAGE: str = "en"

# ==========================
# Input / output
# ==========================

# UI/CLI label -> actual separator
FIELD_DELIMITERS: Dict[str, str] = {
    ";": ";",
    ",": ",",
    "<tab>": "\t",
    "<space>": " ",
}
DELIMITER_ALIASES: Dict[str, str] = {
    "tab": "<tab>",
    "\\t": "<tab>",
    "space": "<space>",
}
DEFAULT_DELIMITER: str = ";"

TTS_SIDES: Tuple[str, ...] = ("Front", "Back")
DEFAULT_TTS_SIDE: str = "Front"

OUTPUT_FILE_PATH: str = "flashcardsWithTTS.csv"
OUTPUT_LINETERMINATOR: str = "\n"

# ==========================
# Anki media folder
# ==========================

ANKI_MEDIA_DIR_ENV: str = "ANKI_MEDIA_DIR"
ANKI_PROFILE: str = os.environ.get("ANKI_PROFILE", "User 1")

# ==========================
# Logging
# ==========================

LOG_DIR: str = "logs"
LOG_FILE_NAME: str = "pipeline.debug.log"
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s %(message)s"

# ==========================
# UI settings
# ==========================

PAGE_TITLE: str = "Anki TTS Flashcards Builder"
PAGE_LAYOUT: str = "wide"
PREVIEW_LIMIT: int = 50
WORKERS_SLIDER_MAX: int = 16

DEMO_TEXT: str = "cat;gato\ndog;perro\n<b>bird</b>;pájaro"
DEMO_LANGUAGE: str = "en"

# ==========================
# Messages and hints
# ==========================

MESSAGES: Dict[str, str] = {
    "paste_prompt": "Paste your flashcards CSV content then press Ctrl+D twice:",
    "no_input": "No input provided.",
    "no_separator": "No separator provided.",
    "no_language": "No language code provided.",
    "no_rows": "No row has exactly two non-empty columns for separator '{separator}'.",
    "unsupported_os": "Unsupported OS.",
    "bad_encoding": "Input is neither UTF-8 nor UTF-16 text.",
    "bad_timeout": "--timeout must be > 0",
    "processing_fmt": "Processing '{front}{separator}{back}'...",
    "done": "Done.",
    "import_hint_fmt": (
        "You can now import the file '{path}' in Anki. "
        "Make sure to enable the option 'Allow HTML' in the import options."
    ),
    "app_title": "🔊 Anki TTS Flashcards Builder",
    "input_label": "Flashcards (two columns per line)",
    "uploader_label": "…or upload .txt / .csv / .tsv",
    "separator_label": "Choose separator",
    "side_label": "Choose side to use for TTS",
    "language_label": "Input language code (e.g. en)",
    "media_dir_label": "Anki media folder",
    "workers_label": "Parallel requests",
    "run_button": "Fetch audio and build file",
    "download_label": "📥 Download {name}",
}


def get_delimiter_choices() -> List[str]:
    """Returns separator labels in display order"""
    return list(FIELD_DELIMITERS.keys())
