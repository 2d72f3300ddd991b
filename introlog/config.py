"""Configuration for introlog logging and failure reporting."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass
class ReporterConfig:
    """Configuration for the package logger that backs failure reporting."""

    # Name of the package root logger; all introlog loggers are its children
    root_logger_name: str = "introlog"

    # Level applied when neither the caller nor the environment provides one
    default_level: int = logging.INFO

    # Environment variable consulted for the initial level
    level_env_var: str = "INTROLOG_LOG_LEVEL"

    # Default record format for the root handler
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def parse_level(self, value: Optional[str]) -> int:
        """Parse a level name or number, falling back to ``default_level``.

        Args:
            value: Case-insensitive level name (e.g. "debug") or numeric string.

        Returns:
            Integer logging level.
        """
        if value is None:
            return self.default_level
        text = value.strip()
        if not text:
            return self.default_level
        if text.isdigit():
            return int(text)
        level = logging.getLevelName(text.upper())
        if isinstance(level, int):
            return level
        return self.default_level

    def level_from_env(self, environ: Optional[Mapping[str, str]] = None) -> int:
        """Return the level requested through ``level_env_var``, if any."""
        env = os.environ if environ is None else environ
        return self.parse_level(env.get(self.level_env_var))


# Global configuration instance
REPORTER_CONFIG = ReporterConfig()
