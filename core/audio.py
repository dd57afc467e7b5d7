"""Text-to-speech (TTS) fetching for flashcard rows."""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import quote

import requests

from config.settings import TTS_ENDPOINT, TTS_REQUEST_TIMEOUT, TTS_STATIC_PARAMS
from core.errors import FetchError
from core.parsing import Row

__all__ = [
    "AudioAsset",
    "TtsRequest",
    "build_tts_request",
    "fetch_audio",
    "source_text",
    "strip_markup",
]

logger = logging.getLogger(__name__)

# Non-greedy, so "<b>x</b>" loses both tags but keeps "x"
_TAG_RE = re.compile(r"<.*?>")


@dataclass(frozen=True)
class TtsRequest:
    """Text to synthesize plus target language."""

    text: str
    language_code: str

    @property
    def encoded_text(self) -> str:
        """Percent-encoded text (spaces as ``%20``) for display and hand-built URLs.

        :func:`fetch_audio` passes :attr:`params` instead and leaves the query
        encoding to ``requests``, which writes spaces as ``+``.
        """
        return quote(self.text, safe="")

    @property
    def params(self) -> Dict[str, str]:
        params = dict(TTS_STATIC_PARAMS)
        params["q"] = self.text
        params["tl"] = self.language_code
        return params


@dataclass
class AudioAsset:
    """Raw audio returned by the TTS service; ``asset_id`` doubles as file stem."""

    data: bytes
    asset_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    text: str = ""


def strip_markup(text: str) -> str:
    """Remove ``<...>`` tags from card text.

    This is a lossy pattern match, not an HTML parser: a stray ``<`` can eat
    everything up to the next ``>`` and entities are left untouched.
    """

    if not text:
        return ""
    return _TAG_RE.sub("", text)


def source_text(row: Row, use_first_side: bool) -> str:
    return row.side_a if use_first_side else row.side_b


def build_tts_request(row: Row, *, use_first_side: bool, language_code: str) -> TtsRequest:
    return TtsRequest(text=strip_markup(source_text(row, use_first_side)), language_code=language_code)


def fetch_audio(
    row: Row,
    *,
    use_first_side: bool,
    language_code: str,
    timeout: Optional[float] = TTS_REQUEST_TIMEOUT,
    endpoint: str = TTS_ENDPOINT,
) -> AudioAsset:
    """Synthesize the chosen side of ``row``; raise FetchError on any failure.

    One GET per call, never retried.
    """

    request = build_tts_request(row, use_first_side=use_first_side, language_code=language_code)
    logger.debug("GET %s params=%s", endpoint, request.params)
    try:
        response = requests.get(endpoint, params=request.params, timeout=timeout)
    except (requests.RequestException, ValueError) as err:
        # ValueError: requests rejects a non-positive timeout before sending
        raise FetchError(request.text, reason=str(err)) from err

    if not 200 <= response.status_code < 300:
        raise FetchError(request.text, status_code=response.status_code)

    data = response.content
    logger.debug("Fetched %s bytes for '%s'", len(data), request.text)
    return AudioAsset(data=data, text=request.text)
