from __future__ import annotations
from pathlib import Path
import fcntl
import os
from typing import Any, Dict, Mapping, Optional
import yaml

from bloz.datatypes.guild_settings import clamp_limit
from bloz.util.logger import get_logger

logger = get_logger("app_configuration")


# Relative to the project base directory
CONFIG_PATH = Path("config") / "app_config.yml"

DEFAULT_PERSONA_NAME = "Bloz"
DEFAULT_WARN_TTL_MS = 6000
DEFAULT_DATA_PATH = "data/data.json"
DEFAULT_CLEANUP_LIMIT = 50


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml`` and exposes typed
    properties for the values the bot needs. Environment variables
    (``BOT_PERSONA_NAME``, ``WARN_TTL_MS``, ``BLOZ_DATA_PATH``) take precedence
    over the file, and the file over built-in defaults.
    """

    def __init__(self, config_path: Path, environ: Optional[Mapping[str, str]] = None) -> None:
        self.config_path = config_path
        self._environ = environ
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def _lookup(self, env_name: str, key: str, default: Any) -> Any:
        value = self.environ.get(env_name)
        if value not in (None, ""):
            return value
        value = self._data.get(key)
        return default if value in (None, "") else value

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def persona_name(self) -> str:
        """Display name used as the prefix of every warning."""
        return str(self._lookup("BOT_PERSONA_NAME", "persona_name", DEFAULT_PERSONA_NAME)).strip() or DEFAULT_PERSONA_NAME

    @property
    def warn_ttl_ms(self) -> int:
        """How long a warning reply stays up, in milliseconds (default 6000)."""
        raw = self._lookup("WARN_TTL_MS", "warn_ttl_ms", DEFAULT_WARN_TTL_MS)
        try:
            value = int(float(raw))
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid warn_ttl_ms %r; using %d", raw, DEFAULT_WARN_TTL_MS)
            return DEFAULT_WARN_TTL_MS
        if value < 0:
            logger.warning("[APP CONFIGURATION] Negative warn_ttl_ms %r; using %d", raw, DEFAULT_WARN_TTL_MS)
            return DEFAULT_WARN_TTL_MS
        return value

    @property
    def data_path(self) -> Path:
        """Location of the JSON guild settings store."""
        return Path(str(self._lookup("BLOZ_DATA_PATH", "data_path", DEFAULT_DATA_PATH))).resolve()

    @property
    def cleanup_default_limit(self) -> int:
        """Number of messages scanned by ``/cleanup`` when no limit is given."""
        cleanup_config = self._data.get("cleanup", {})
        raw = cleanup_config.get("default_limit", DEFAULT_CLEANUP_LIMIT) if isinstance(cleanup_config, dict) else DEFAULT_CLEANUP_LIMIT
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return DEFAULT_CLEANUP_LIMIT
        return clamp_limit(value)

