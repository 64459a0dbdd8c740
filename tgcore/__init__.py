"""Shared infrastructure -- project-wide logging.

This package must NEVER import from ``tgbot/`` or ``tgapi/``.
"""

from tgcore.logger import BotLogger

__all__ = [
    "BotLogger",
]
