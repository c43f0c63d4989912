from __future__ import annotations

import os
from pathlib import Path
import threading
from typing import Callable, Optional

from splash_inputs import clean_local_splashes, load_splashes_from_file
from splash_logging import get_logger
from splash_resolver import SourceConfig, SplashResolution, SplashResolver

logger = get_logger("config")

DEFAULT_USE_REMOTE = True
DEFAULT_REMOTE_URL = "https://github.com/z2six/SplashOverride/blob/master/splashes.txt"
DEFAULT_LOCAL_SPLASHES: tuple[str, ...] = (
    "Welcome to Minecraft!",
    "Custom splashes from SplashOverride (local fallback).",
    "Edit localSplashes in the config to customize these messages.",
)

LOCAL_SPLASH_SEPARATOR = "|"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _getenv(name: str) -> str:
    return os.getenv(name, "").strip()


def parse_bool(raw: str, default: bool) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    return default


def load_source_config_from_env() -> SourceConfig:
    """Load the splash source settings from env vars.

    Supported:
      - SPLASHOVERRIDE_USE_REMOTE=true|false
      - SPLASHOVERRIDE_REMOTE_URL=https://...
      - SPLASHOVERRIDE_LOCAL_SPLASHES=first|second|third
      - SPLASHOVERRIDE_LOCAL_FILE=/path/to/splashes.txt (wins over the inline list)

    Unset values fall back to the built-in defaults.
    """

    use_remote = parse_bool(_getenv("SPLASHOVERRIDE_USE_REMOTE"), DEFAULT_USE_REMOTE)
    remote_url = _getenv("SPLASHOVERRIDE_REMOTE_URL") or DEFAULT_REMOTE_URL

    local_file = _getenv("SPLASHOVERRIDE_LOCAL_FILE")
    inline = os.getenv("SPLASHOVERRIDE_LOCAL_SPLASHES")
    if local_file:
        local_splashes = load_splashes_from_file(Path(local_file).expanduser())
    elif inline is not None:
        local_splashes = clean_local_splashes(inline.split(LOCAL_SPLASH_SEPARATOR))
    else:
        local_splashes = DEFAULT_LOCAL_SPLASHES

    return SourceConfig(use_remote=use_remote, remote_url=remote_url, local_splashes=local_splashes)


class SplashConfigHolder:
    """Current config snapshot plus the reload hook that invalidates the resolver."""

    def __init__(
        self,
        resolver: SplashResolver,
        loader: Callable[[], SourceConfig] = load_source_config_from_env,
    ) -> None:
        self._resolver = resolver
        self._loader = loader
        self._lock = threading.Lock()
        self._current: Optional[SourceConfig] = None

    @property
    def current(self) -> SourceConfig:
        with self._lock:
            if self._current is None:
                self._current = self._loader()
            return self._current

    def reload(self, config: Optional[SourceConfig] = None) -> SourceConfig:
        snapshot = config if config is not None else self._loader()
        with self._lock:
            self._current = snapshot

        logger.info(
            "Config loaded: use_remote=%s, remote_url=%r, local_splashes=%s",
            snapshot.use_remote,
            snapshot.remote_url,
            len(snapshot.local_splashes),
        )
        self._resolver.invalidate()
        return snapshot

    def resolve(self) -> tuple[str, ...]:
        return self._resolver.resolve(self.current)

    def resolve_detailed(self) -> SplashResolution:
        return self._resolver.resolve_detailed(self.current)
