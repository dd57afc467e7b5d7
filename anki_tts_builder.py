"""Streamlit entrypoint for the TTS flashcards builder.

The UI lives in ``app/app.py``; ``streamlit run anki_tts_builder.py`` and
``streamlit run app/app.py`` are equivalent.
"""
from importlib import import_module


def main() -> None:
    """Delegate execution to ``app.app``."""
    import_module("app.app")


if __name__ == "__main__":
    main()
