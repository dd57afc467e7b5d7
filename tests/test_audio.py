"""Tests covering TTS request building and fetching."""
from __future__ import annotations

from typing import Any, Dict

import pytest
import requests

from core import audio
from core.errors import FetchError
from core.parsing import Row


class _DummyResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"ID3-fake-mp3"):
        self.status_code = status_code
        self.content = content


def test_strip_markup_removes_tags_non_greedily():
    assert audio.strip_markup("<b>bold</b> and <i>italic</i>") == "bold and italic"
    assert audio.strip_markup('<span class="x">hi</span><br/>') == "hi"
    assert audio.strip_markup("no tags") == "no tags"
    assert audio.strip_markup("") == ""


def test_strip_markup_is_lossy_on_stray_brackets():
    # "<" without a matching tag eats text up to the next ">"
    assert audio.strip_markup("a < b and c > d") == "a  d"


def test_build_tts_request_uses_selected_side():
    row = Row("<b>cat</b>", "gato")
    front = audio.build_tts_request(row, use_first_side=True, language_code="en")
    back = audio.build_tts_request(row, use_first_side=False, language_code="es")
    assert front.text == "cat"
    assert front.language_code == "en"
    assert back.text == "gato"
    assert back.params == {"ie": "UTF-8", "client": "tw-ob", "q": "gato", "tl": "es"}


def test_tts_request_percent_encodes_text():
    request = audio.TtsRequest(text="buenos días & más", language_code="es")
    assert request.encoded_text == "buenos%20d%C3%ADas%20%26%20m%C3%A1s"


def test_fetch_audio_success(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: Dict[str, Any] = {}

    def fake_get(url: str, params: Dict[str, str], timeout: float):  # type: ignore[override]
        captured.update(url=url, params=params, timeout=timeout)
        return _DummyResponse(200, b"mp3-bytes")

    monkeypatch.setattr(audio.requests, "get", fake_get)

    asset = audio.fetch_audio(Row("<i>dog</i>", "perro"), use_first_side=True, language_code="en", timeout=5)

    assert asset.data == b"mp3-bytes"
    assert asset.text == "dog"
    assert len(asset.asset_id) == 32
    assert captured["url"] == "https://translate.google.com/translate_tts"
    assert captured["params"]["q"] == "dog"
    assert captured["params"]["tl"] == "en"
    assert captured["timeout"] == 5


def test_fetch_audio_generates_unique_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(audio.requests, "get", lambda *_, **__: _DummyResponse())
    row = Row("same", "same")
    ids = {audio.fetch_audio(row, use_first_side=True, language_code="en").asset_id for _ in range(50)}
    assert len(ids) == 50


@pytest.mark.parametrize("status", [400, 404, 429, 500, 503])
def test_fetch_audio_non_success_status_raises(monkeypatch: pytest.MonkeyPatch, status: int) -> None:
    monkeypatch.setattr(audio.requests, "get", lambda *_, **__: _DummyResponse(status, b""))

    with pytest.raises(FetchError) as excinfo:
        audio.fetch_audio(Row("cat", "gato"), use_first_side=False, language_code="es")

    assert excinfo.value.status_code == status
    assert excinfo.value.text == "gato"
    assert f"HTTP {status}" in str(excinfo.value)
    assert "gato" in str(excinfo.value)


def test_fetch_audio_transport_error_raises_fetch_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*_: Any, **__: Any):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(audio.requests, "get", boom)

    with pytest.raises(FetchError) as excinfo:
        audio.fetch_audio(Row("cat", "gato"), use_first_side=True, language_code="en")

    assert excinfo.value.status_code is None
    assert "connection refused" in excinfo.value.reason
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_fetch_audio_rejected_timeout_raises_fetch_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def reject(*_: Any, **__: Any):
        raise ValueError("timeout cannot be set to a value less than or equal to 0")

    monkeypatch.setattr(audio.requests, "get", reject)

    with pytest.raises(FetchError) as excinfo:
        audio.fetch_audio(Row("cat", "gato"), use_first_side=True, language_code="en", timeout=0)

    assert excinfo.value.text == "cat"
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_fetch_audio_debug_log_shows_raw_query_params(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    monkeypatch.setattr(audio.requests, "get", lambda *_, **__: _DummyResponse(200, b"mp3"))
    caplog.set_level("DEBUG", logger="core.audio")

    audio.fetch_audio(Row("good morning", "buenos dias"), use_first_side=True, language_code="en")

    assert "'q': 'good morning'" in caplog.text
    assert "%20" not in caplog.text
