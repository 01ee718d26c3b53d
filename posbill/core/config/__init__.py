"""
POSBILL Core Config
=====================
Engine settings (tax rate, numbering, stock fallback, cart defaults).
"""

from posbill.core.config.settings import ENV_PREFIX, EngineSettings

__all__ = [
    "EngineSettings",
    "ENV_PREFIX",
]
