# src/game/share.py
from __future__ import annotations

from .config import GAME_TITLE, GAME_URL


def share_text(score: int, url: str = GAME_URL, title: str = GAME_TITLE) -> str:
    """Brag line + link for the given score."""
    return f"🏃 I scored {int(score)} points in {title}! Can you beat my score? 🎮\n{url}"
