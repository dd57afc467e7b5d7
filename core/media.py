"""Anki media folder helpers: locating ``collection.media`` and writing audio into it."""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from config.settings import ANKI_MEDIA_DIR_ENV, ANKI_PROFILE, AUDIO_EXTENSION, MESSAGES
from core.audio import AudioAsset
from core.errors import InputError, StoreError

__all__ = ["audio_filename", "resolve_media_dir", "sound_tag", "store_audio"]

logger = logging.getLogger(__name__)


def audio_filename(asset: AudioAsset) -> str:
    return f"{asset.asset_id}.{AUDIO_EXTENSION}"


def sound_tag(filename: str) -> str:
    """Return the Anki reference token for a media file."""
    return f"[sound:{filename}]"


def store_audio(asset: AudioAsset, media_dir: Path | str) -> str:
    """Write ``asset`` into ``media_dir`` and return the bare file name.

    The directory must already exist; it is Anki's, not ours.
    """

    directory = Path(media_dir)
    filename = audio_filename(asset)
    path = directory / filename
    if not directory.is_dir():
        raise StoreError(directory, "media directory not found", text=asset.text)
    try:
        # "xb": ids are unique per asset, an existing file means something is wrong
        with path.open("xb") as fh:
            fh.write(asset.data)
    except OSError as err:
        raise StoreError(path, err.strerror or str(err), text=asset.text) from err
    logger.debug("Stored %s (%s bytes)", path, len(asset.data))
    return filename


def resolve_media_dir(
    profile: str = ANKI_PROFILE,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Locate the ``collection.media`` folder of an Anki profile.

    ``ANKI_MEDIA_DIR`` wins over the platform default.
    """

    env = os.environ if env is None else env
    override = (env.get(ANKI_MEDIA_DIR_ENV) or "").strip()
    if override:
        return Path(override).expanduser()

    platform = platform or sys.platform
    home = home or Path.home()
    if platform.startswith("linux"):
        base = home / ".local" / "share" / "Anki2"
    elif platform == "darwin":
        base = home / "Library" / "Application Support" / "Anki2"
    elif platform.startswith("win"):
        appdata = env.get("APPDATA")
        base = Path(appdata) / "Anki2" if appdata else home / "AppData" / "Roaming" / "Anki2"
    else:
        raise InputError(MESSAGES["unsupported_os"])
    return base / profile / "collection.media"
