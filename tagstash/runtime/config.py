"""Configuration model and loader for tagstash.

Defines the `AppConfig` dataclass that merges an optional `config.toml` with
environment variable overrides and provides typed access across the
application.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


DEFAULT_CONFIG_FILE = "config.toml"


class ConfigError(Exception):
    """Raised when settings are missing or malformed. Fatal at startup."""


def _get_bool(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    v = env.get(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    v = env.get(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {v!r}") from e


def _get_list(env: Mapping[str, str], name: str) -> Optional[List[str]]:
    v = env.get(name)
    if v is None:
        return None
    return [x.strip() for x in v.split(",") if x.strip()]


def _str_list(section: Dict[str, Any], key: str, where: str) -> Optional[List[str]]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(x, str) for x in value):
        raise ConfigError(f"{where}.{key} must be a list of strings")
    return list(value)


def _normalize_username(name: str) -> str:
    return name[1:] if name.startswith("@") else name


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"malformed config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e


@dataclass(frozen=True)
class AppConfig:
    """Application configuration resolved from `config.toml` and environment."""

    # Telegram
    telegram_bot_token: str
    allowed_usernames: List[str]

    # Download
    target_dir: str
    image_tags: List[str] = field(default_factory=list)
    sticker_tags: List[str] = field(default_factory=list)
    caption_cache_size: int = 10

    # Logging & Health
    log_level: str = "INFO"
    logs_dir: Optional[str] = None
    log_rotate_max_bytes: int = 5 * 1024 * 1024
    log_rotate_backup_count: int = 10
    health_enable: bool = True
    health_port: int = 8081
    bind_health_localhost_only: bool = True

    def is_allowed(self, username: Optional[str]) -> bool:
        return username is not None and username in self.allowed_usernames

    @staticmethod
    def load(
        path: Optional[str] = None, env: Optional[Mapping[str, str]] = None
    ) -> "AppConfig":
        """Load settings from TOML (if any), then apply environment overrides.

        The file is `path`, else `$TAGSTASH_CONFIG`, else `./config.toml` when
        present. An explicitly named file that does not exist is an error.

        Raises:
            ConfigError: on malformed input or missing required settings.
        """
        env = os.environ if env is None else env
        explicit = path or env.get("TAGSTASH_CONFIG")
        data: Dict[str, Any] = {}
        if explicit:
            data = _read_toml(Path(explicit))
        elif Path(DEFAULT_CONFIG_FILE).is_file():
            data = _read_toml(Path(DEFAULT_CONFIG_FILE))

        telegram = data.get("telegram", {})
        download = data.get("download", {})
        if not isinstance(telegram, dict) or not isinstance(download, dict):
            raise ConfigError("[telegram] and [download] must be tables")

        token = env.get("TELEGRAM_BOT_TOKEN") or telegram.get("token") or ""
        allowed = _get_list(env, "TELEGRAM_ALLOWED_USERNAMES")
        if allowed is None:
            allowed = _str_list(telegram, "allowed_usernames", "telegram")
        target_dir = env.get("TARGET_DIR") or download.get("target_dir") or ""
        image_tags = _get_list(env, "IMAGE_TAGS")
        if image_tags is None:
            image_tags = _str_list(download, "image_tags", "download") or []
        sticker_tags = _get_list(env, "STICKER_TAGS")
        if sticker_tags is None:
            sticker_tags = _str_list(download, "sticker_tags", "download") or []

        if not isinstance(token, str) or not token:
            raise ConfigError("telegram token is not configured")
        if allowed is None:
            raise ConfigError("allowed usernames are not configured")
        if not isinstance(target_dir, str) or not target_dir:
            raise ConfigError("download target_dir is not configured")

        file_cache_size = download.get("caption_cache_size", 10)
        if not isinstance(file_cache_size, int):
            raise ConfigError("download.caption_cache_size must be an integer")
        cache_size = _get_int(env, "CAPTION_CACHE_SIZE", file_cache_size)
        if cache_size < 1:
            raise ConfigError("CAPTION_CACHE_SIZE must be >= 1")

        return AppConfig(
            telegram_bot_token=token,
            allowed_usernames=[_normalize_username(u) for u in allowed],
            target_dir=target_dir,
            image_tags=image_tags,
            sticker_tags=sticker_tags,
            caption_cache_size=cache_size,
            log_level=env.get("LOG_LEVEL", "INFO"),
            logs_dir=env.get("LOGS_DIR") or None,
            log_rotate_max_bytes=_get_int(env, "LOG_ROTATE_MAX_BYTES", 5 * 1024 * 1024),
            log_rotate_backup_count=_get_int(env, "LOG_ROTATE_BACKUP_COUNT", 10),
            health_enable=_get_bool(env, "HEALTH_ENABLE", True),
            health_port=_get_int(env, "HEALTH_PORT", 8081),
            bind_health_localhost_only=_get_bool(env, "BIND_HEALTH_LOCALHOST_ONLY", True),
        )
