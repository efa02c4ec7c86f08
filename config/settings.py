"""
config/settings.py
------------------
All configuration is read from environment variables.
The core text functions never read these; they are the defaults used by the
HTTP surface (app.py) and the file runner (prep_file.py).

Usage:
    from config.settings import settings
    print(settings.PREP_TO_LOWER)
"""

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class Settings:
    # ── Flask ──────────────────────────────────────────────────────────────
    FLASK_ENV: str = field(default_factory=lambda: os.getenv("FLASK_ENV", "production"))
    PORT: int = field(default_factory=lambda: int(os.getenv("PORT", 5000)))
    CORS_ORIGINS: tuple = field(default_factory=lambda: tuple(
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ))

    # ── Request limits ─────────────────────────────────────────────────────
    MAX_RAW_CHARS: int = field(default_factory=lambda: int(os.getenv("MAX_RAW_CHARS", 5000)))
    MAX_BATCH_SIZE: int = field(default_factory=lambda: int(os.getenv("MAX_BATCH_SIZE", 100)))

    # ── Preprocessing defaults ─────────────────────────────────────────────
    # Empty encoding means "leave the text as decoded"
    PREP_ENCODING: str = field(default_factory=lambda: os.getenv("PREP_ENCODING", ""))
    PREP_REMOVE_UNENCODABLE: bool = field(default_factory=lambda: _env_bool("PREP_REMOVE_UNENCODABLE", "false"))
    PREP_TO_LOWER: bool = field(default_factory=lambda: _env_bool("PREP_TO_LOWER", "true"))
    PREP_STRIP_ACCENTS: bool = field(default_factory=lambda: _env_bool("PREP_STRIP_ACCENTS", "false"))
    PREP_REDUCE_LEN: bool = field(default_factory=lambda: _env_bool("PREP_REDUCE_LEN", "false"))
    PREP_SEPARATOR: str = field(default_factory=lambda: os.getenv("PREP_SEPARATOR", " "))

    def prep_defaults(self) -> dict:
        """Preprocessing keyword arguments for parse_text(), from the environment."""
        return {
            "encoding": self.PREP_ENCODING or None,
            "remove_unencodable_char": self.PREP_REMOVE_UNENCODABLE,
            "to_lower": self.PREP_TO_LOWER,
            "strip_accents": self.PREP_STRIP_ACCENTS,
            "reduce_len": self.PREP_REDUCE_LEN,
            "split": self.PREP_SEPARATOR,
        }


# Singleton, import this everywhere
settings = Settings()
