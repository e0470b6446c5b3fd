"""Worker configuration: YAML file for settings, environment for secrets."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
CONFIG_PATH = PROJECT_ROOT / "config" / "worker_config.yaml"


class EnabledFlag:
    """Thread-safe on/off switch shared by the worker and the HTTP API."""

    def __init__(self, enabled: bool = False):
        self._lock = threading.Lock()
        self._enabled = enabled

    @property
    def is_enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def set(self, enabled: bool) -> None:
        with self._lock:
            self._enabled = enabled


@dataclass
class SiteConfig:
    base_url: str = "https://web.simple-mmo.com"
    login_path: str = "/login/credentials"
    travel_path: str = "/travel"

    @property
    def travel_url(self) -> str:
        return self.base_url.rstrip("/") + self.travel_path

    @property
    def login_url(self) -> str:
        return self.base_url.rstrip("/") + self.login_path


@dataclass
class BrowserConfig:
    headless: bool = False
    cookies_path: str = "cookies.json"


@dataclass
class LoopConfig:
    tick_delay_seconds: float = 1.0
    disabled_poll_seconds: float = 1.0
    unknown_page_backoff_seconds: float = 5.0
    attack_click_timeout_ms: float = 100_000
    alert_interval_seconds: float = 0.5


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class WorkerConfig:
    site: SiteConfig = field(default_factory=SiteConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    start_enabled: bool = False
    login: str = ""
    password: str = ""

    @classmethod
    def from_dict(cls, raw: dict) -> WorkerConfig:
        return cls(
            site=SiteConfig(**(raw.get("site") or {})),
            browser=BrowserConfig(**(raw.get("browser") or {})),
            loop=LoopConfig(**(raw.get("loop") or {})),
            server=ServerConfig(**(raw.get("server") or {})),
            start_enabled=bool(raw.get("start_enabled", False)),
        )


def load_config(path: str | Path | None = None) -> WorkerConfig:
    """Load settings from YAML and credentials from the environment.

    A missing file at the default location falls back to built-in
    defaults; an explicitly given path must exist.
    """
    config_path = Path(path) if path is not None else CONFIG_PATH
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        config = WorkerConfig.from_dict(raw)
    elif path is None:
        logger.warning(f"Config file {config_path} not found, using defaults")
        config = WorkerConfig()
    else:
        raise FileNotFoundError(config_path)

    config.login = os.environ.get("MMO_LOGIN", "")
    config.password = os.environ.get("MMO_PASSWORD", "")
    return config
