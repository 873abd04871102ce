"""Application settings for the drawing export service.

Values come from environment variables first, then from an optional INI file
``data/app.ini`` and finally from the defaults below.  The INI may contain:

    [overlay]
    raster_scale = 2
    jpeg_quality = 95
    default_filename = edge-template-filled.pdf

    [webhook]
    url = https://automation.example.com/hooks/drawings
    timeout = 10

The data directory itself can be moved with ``WEARCO_DATA_DIR``.
"""

from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "edge-template-filled.pdf"
DEFAULT_RASTER_SCALE = 2.0
DEFAULT_JPEG_QUALITY = 95
DEFAULT_HTTP_TIMEOUT = 10.0


@dataclass(frozen=True, slots=True)
class AppSettings:
    raster_scale: float = DEFAULT_RASTER_SCALE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    default_filename: str = DEFAULT_FILENAME
    webhook_url: Optional[str] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT


def _data_dir(env: Mapping[str, str]) -> Path:
    return Path(env.get("WEARCO_DATA_DIR", "data"))


def _read_ini(path: Path) -> configparser.ConfigParser:
    cp = configparser.ConfigParser()
    if path.exists():
        try:
            cp.read(path, encoding="utf-8")
        except configparser.Error as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
            return configparser.ConfigParser()
    return cp


def _pick(env: Mapping[str, str], key: str, cp: configparser.ConfigParser, section: str, option: str) -> Optional[str]:
    raw = env.get(key)
    if raw is None or not raw.strip():
        raw = cp.get(section, option, fallback=None)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _as_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(env: Optional[Mapping[str, str]] = None, ini_path: Optional[Path] = None) -> AppSettings:
    """Build :class:`AppSettings` from ``env`` (default ``os.environ``) and the INI file."""

    env = os.environ if env is None else env
    cp = _read_ini(ini_path or _data_dir(env) / "app.ini")

    scale = _as_float("WEARCO_RASTER_SCALE", _pick(env, "WEARCO_RASTER_SCALE", cp, "overlay", "raster_scale"), DEFAULT_RASTER_SCALE)
    if scale < DEFAULT_RASTER_SCALE:
        raise ValueError(f"WEARCO_RASTER_SCALE must be at least {DEFAULT_RASTER_SCALE:g}, got {scale:g}")

    quality = _as_float("WEARCO_JPEG_QUALITY", _pick(env, "WEARCO_JPEG_QUALITY", cp, "overlay", "jpeg_quality"), DEFAULT_JPEG_QUALITY)
    if not 1 <= quality <= 100:
        raise ValueError(f"WEARCO_JPEG_QUALITY must be between 1 and 100, got {quality:g}")

    timeout = _as_float("WEARCO_HTTP_TIMEOUT", _pick(env, "WEARCO_HTTP_TIMEOUT", cp, "webhook", "timeout"), DEFAULT_HTTP_TIMEOUT)
    if timeout <= 0:
        raise ValueError(f"WEARCO_HTTP_TIMEOUT must be positive, got {timeout:g}")

    return AppSettings(
        raster_scale=scale,
        jpeg_quality=int(quality),
        default_filename=_pick(env, "WEARCO_DEFAULT_FILENAME", cp, "overlay", "default_filename") or DEFAULT_FILENAME,
        webhook_url=_pick(env, "WEARCO_WEBHOOK_URL", cp, "webhook", "url"),
        http_timeout=timeout,
    )


__all__ = ["AppSettings", "DEFAULT_FILENAME", "load_settings"]
