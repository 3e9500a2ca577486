"""
Centralized settings and path configuration for the checkout service.

Values come from environment variables with sensible defaults, so the same
code runs under uvicorn, the scripts and the test suite.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_PORT = 8080


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to the current working directory for installed copies
    return Path.cwd()


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Server
    port: int
    host: str
    testing: bool

    # Storage
    database_path: Path
    seed_dir: Path

    # Logging
    log_dir: Path
    log_level: str = "INFO"

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """Load settings from the environment (or an explicit mapping)."""
        env = os.environ if environ is None else environ
        root = get_project_root()

        raw_port = env.get('PORT') or str(DEFAULT_PORT)
        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {raw_port!r}")
        if not 0 < port < 65536:
            raise ValueError(f"PORT out of range: {port}")

        log_level = env.get('LOG_LEVEL', 'INFO').strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            port=port,
            host=env.get('HOST', '0.0.0.0'),
            testing=env.get('APP_ENV', '').strip().lower() == 'test',
            database_path=Path(env.get('CHECKOUT_DB_PATH') or root / 'db.sqlite'),
            seed_dir=Path(__file__).resolve().parent.parent / 'data' / 'seed',
            log_dir=Path(env.get('CHECKOUT_LOG_DIR') or root / 'logs'),
            log_level=log_level,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
