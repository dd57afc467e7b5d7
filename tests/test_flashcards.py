"""End-to-end tests for core.flashcards.build_flashcards.

Network access is replaced by a fake ``requests.get``; audio is written into
``tmp_path`` acting as the Anki media folder.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List

import pytest

from core import audio
from core.errors import FetchError, InputError, PipelineError, StoreError
from core.flashcards import BuildOptions, build_flashcards, prepare_rows


class _DummyResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"mp3") -> None:
        self.status_code = status_code
        self.content = content


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "collection.media"
    folder.mkdir()
    return folder


@pytest.fixture
def options(tmp_path: Path, media_dir: Path) -> BuildOptions:
    return BuildOptions(
        separator=";",
        language_code="es",
        media_dir=media_dir,
        output_path=tmp_path / "flashcardsWithTTS.csv",
        max_workers=2,
    )


@pytest.fixture
def fake_tts(monkeypatch: pytest.MonkeyPatch) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def fake_get(url: str, params: Dict[str, str], timeout: float):  # type: ignore[override]
        calls.append(dict(params))
        return _DummyResponse(200, f"audio::{params['q']}".encode("utf-8"))

    monkeypatch.setattr(audio.requests, "get", fake_get)
    return calls


def test_end_to_end_two_rows(options, media_dir, fake_tts):
    result = build_flashcards("cat;gato\rdog;perro", options)

    lines = options.output_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    pattern = re.compile(r"^\[sound:([0-9a-f]{32}\.mp3)\](cat;gato|dog;perro)$")
    matches = [pattern.match(line) for line in lines]
    assert all(matches)
    assert [m.group(2) for m in matches] == ["cat;gato", "dog;perro"]

    files = sorted(p.name for p in media_dir.iterdir())
    assert files == sorted(m.group(1) for m in matches)
    assert {(media_dir / m.group(1)).read_bytes() for m in matches} == {b"audio::cat", b"audio::dog"}

    assert sorted(call["q"] for call in fake_tts) == ["cat", "dog"]
    assert all(call["tl"] == "es" for call in fake_tts)
    assert result.output_path == options.output_path
    assert len(result.rows) == 2


def test_back_side_becomes_tts_front(options, fake_tts):
    options.tts_front = False
    build_flashcards("cat;<i>gato</i>", options)

    line = options.output_path.read_text(encoding="utf-8").strip()
    assert line.endswith("]<i>gato</i>;cat")
    assert fake_tts[0]["q"] == "gato"


def test_tab_separator_choice(options, fake_tts):
    options.separator = "<tab>"
    build_flashcards("house\tcasa\n", options)
    assert options.output_path.read_text(encoding="utf-8").strip().endswith("]house\tcasa")


@pytest.mark.parametrize("raw", ["", "   ", "\r\n\r\n", None])
def test_empty_input_is_input_error(options, raw, monkeypatch):
    def no_network(*_, **__):
        raise AssertionError("network must not be used")

    monkeypatch.setattr(audio.requests, "get", no_network)

    with pytest.raises(InputError):
        build_flashcards(raw, options)
    assert not options.output_path.exists()


def test_no_valid_rows_is_input_error(options):
    with pytest.raises(InputError):
        prepare_rows("a,b\nc,d", options)


def test_missing_language_is_input_error(options):
    options.language_code = "  "
    with pytest.raises(InputError):
        prepare_rows("a;b", options)


def test_fetch_failure_writes_nothing(options, media_dir, monkeypatch):
    def fake_get(url: str, params: Dict[str, str], timeout: float):  # type: ignore[override]
        if params["q"] == "dog":
            return _DummyResponse(429, b"")
        return _DummyResponse(200, b"ok")

    monkeypatch.setattr(audio.requests, "get", fake_get)
    options.max_workers = 1

    with pytest.raises(FetchError) as excinfo:
        build_flashcards("cat;gato\ndog;perro\nbird;pajaro", options)

    assert excinfo.value.status_code == 429
    assert excinfo.value.text == "dog"
    assert not options.output_path.exists()


def test_missing_media_dir_is_store_error(options, tmp_path, fake_tts):
    options.media_dir = tmp_path / "not-there"
    with pytest.raises(StoreError):
        build_flashcards("cat;gato", options)
    assert not options.output_path.exists()


def test_injected_fetch_and_store(options):
    stored: List[bytes] = []

    def fetch(row):
        return audio.AudioAsset(data=row.side_a.encode(), asset_id=row.side_a)

    def store(asset):
        stored.append(asset.data)
        return f"{asset.asset_id}.mp3"

    result = build_flashcards("one;uno\ntwo;dos", options, fetch=fetch, store=store)

    assert [row.to_line() for row in result.rows] == [
        "[sound:one.mp3]one;uno",
        "[sound:two.mp3]two;dos",
    ]
    assert sorted(stored) == [b"one", b"two"]


def test_unexpected_step_error_is_wrapped(options):
    def fetch(row):
        raise KeyError(row.side_a)

    with pytest.raises(PipelineError) as excinfo:
        build_flashcards("cat;gato", options, fetch=fetch, store=lambda asset: "x.mp3")

    assert isinstance(excinfo.value.__cause__, KeyError)
    assert not options.output_path.exists()
