from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import threading
import time
from typing import Callable, Optional

import requests

from splash_inputs import parse_splash_lines
from splash_logging import get_logger
from splash_sources import normalize_source_url

logger = get_logger("resolver")

StatusCallback = Callable[[str], None]

MOD_ID = "splashoverride"
USER_AGENT = f"SplashOverride/{MOD_ID}"
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 10.0
DEFAULT_TOTAL_TIMEOUT = 10.0
BODY_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class SourceConfig:
    use_remote: bool
    remote_url: str
    local_splashes: tuple[str, ...]


class SplashSource(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"
    NONE = "none"


@dataclass(frozen=True)
class SplashResolution:
    splashes: tuple[str, ...]
    source: SplashSource


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class RemoteFetch:
    status: FetchStatus
    url: str
    splashes: tuple[str, ...] = ()
    detail: Optional[str] = None


def _read_body(response: requests.Response, deadline: float) -> Optional[bytes]:
    """Read a streamed body, giving up once the deadline passes (None)."""

    body = bytearray()
    for chunk in response.iter_content(chunk_size=BODY_CHUNK_SIZE):
        if time.monotonic() > deadline:
            return None
        body.extend(chunk)
    if time.monotonic() > deadline:
        return None
    return bytes(body)


def fetch_remote_splashes(
    url: str,
    *,
    session: requests.Session,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: float = DEFAULT_READ_TIMEOUT,
    total_timeout: float = DEFAULT_TOTAL_TIMEOUT,
) -> RemoteFetch:
    """Perform the single fetch attempt for a remote splash list.

    Returns a classified outcome instead of raising: transport errors,
    non-2xx responses, undecodable bodies and requests running past
    `total_timeout` are FAILED, a body with no usable lines is EMPTY.

    `read_timeout` bounds each socket wait; `total_timeout` bounds the whole
    attempt and is checked between body chunks, so a slow trickle overshoots
    it by at most one `read_timeout`.
    """

    if not (url or "").strip():
        logger.warning("Remote URL is blank; skipping remote fetch.")
        return RemoteFetch(FetchStatus.FAILED, url or "", detail="blank URL")

    normalized = normalize_source_url(url)
    logger.info("Fetching splashes from remote URL: %s", normalized)
    deadline = time.monotonic() + total_timeout

    try:
        with session.get(
            normalized,
            headers={"User-Agent": USER_AGENT},
            timeout=(connect_timeout, read_timeout),
            allow_redirects=True,
            stream=True,
        ) as response:
            status_code = response.status_code
            if status_code < 200 or status_code >= 300:
                logger.warning("Remote splash fetch failed: HTTP %s from %s", status_code, normalized)
                return RemoteFetch(FetchStatus.FAILED, normalized, detail=f"HTTP {status_code}")

            raw = _read_body(response, deadline)

        if raw is None:
            logger.warning("Remote splash fetch exceeded %ss total for URL: %s", total_timeout, normalized)
            return RemoteFetch(FetchStatus.FAILED, normalized, detail=f"exceeded {total_timeout}s total")

        body = raw.decode("utf-8-sig")
    # ValueError also covers UnicodeDecodeError and urllib3's URL parse errors.
    except (requests.RequestException, ValueError) as error:
        logger.warning("Exception while fetching remote splashes from %r: %s", normalized, error)
        logger.debug("Full remote fetch traceback:", exc_info=True)
        return RemoteFetch(FetchStatus.FAILED, normalized, detail=str(error))

    if not body.strip():
        logger.warning("Remote splash response body is empty for URL: %s", normalized)
        return RemoteFetch(FetchStatus.EMPTY, normalized, detail="empty body")

    splashes = parse_splash_lines(body)
    if not splashes:
        logger.warning("Remote splash response has no usable lines for URL: %s", normalized)
        return RemoteFetch(FetchStatus.EMPTY, normalized, detail="only comments or blank lines")

    return RemoteFetch(FetchStatus.OK, normalized, splashes=splashes)


class SplashResolver:
    """Single-flight, per-generation cache of the resolved splash list.

    The first caller that finds the cache empty builds the list (remote
    first, then the local fallback); concurrent callers wait for that build
    and reuse its result. `invalidate()` starts a new generation: a build
    still running for the previous generation finishes but is not stored,
    and callers that arrived before the invalidation never store anything
    under the new generation.

    A session created here is owned by the resolver and closed by `close()`
    (or on leaving a `with` block); an injected session is left to its owner.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        on_status: Optional[StatusCallback] = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        total_timeout: float = DEFAULT_TOTAL_TIMEOUT,
    ) -> None:
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._on_status = on_status
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout
        self._total_timeout = total_timeout

        # _state_lock guards _entry, _generation and _last_build; _build_lock serializes builds.
        self._state_lock = threading.Lock()
        self._build_lock = threading.Lock()
        self._entry: Optional[SplashResolution] = None
        self._generation = 0
        # Most recent finished build, stored or not, tagged with its generation.
        self._last_build: Optional[tuple[int, SplashResolution]] = None

    def __enter__(self) -> SplashResolver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    @property
    def generation(self) -> int:
        with self._state_lock:
            return self._generation

    @property
    def cached(self) -> Optional[SplashResolution]:
        with self._state_lock:
            return self._entry

    def invalidate(self) -> None:
        with self._state_lock:
            self._entry = None
            self._generation += 1
            generation = self._generation
        logger.debug("Splash cache invalidated (generation %s).", generation)

    def resolve(self, config: SourceConfig) -> tuple[str, ...]:
        return self.resolve_detailed(config).splashes

    def resolve_detailed(self, config: SourceConfig) -> SplashResolution:
        with self._state_lock:
            if self._entry is not None:
                logger.debug("Returning cached splash list (%s entries).", len(self._entry.splashes))
                return self._entry
            generation = self._generation

        with self._build_lock:
            with self._state_lock:
                # Another caller may have finished a build while we waited.
                if self._entry is not None:
                    return self._entry
                if self._last_build is not None and self._last_build[0] == generation:
                    # The build we queued behind was invalidated; share it without storing.
                    return self._last_build[1]

            resolution = self._build(config)

            with self._state_lock:
                self._last_build = (generation, resolution)
                if self._generation == generation:
                    self._entry = resolution
                else:
                    logger.debug(
                        "Discarding splash list built for generation %s (current is %s).",
                        generation,
                        self._generation,
                    )
            return resolution

    def _status(self, message: str) -> None:
        if self._on_status:
            self._on_status(message)

    def _build(self, config: SourceConfig) -> SplashResolution:
        if config.use_remote:
            self._status("Fetching remote splashes...")
            fetched = fetch_remote_splashes(
                config.remote_url,
                session=self._session,
                connect_timeout=self._connect_timeout,
                read_timeout=self._read_timeout,
                total_timeout=self._total_timeout,
            )
            if fetched.status is FetchStatus.OK:
                logger.info("Loaded %s splashes from remote URL.", len(fetched.splashes))
                self._status(f"Loaded {len(fetched.splashes)} remote splashes.")
                return SplashResolution(fetched.splashes, SplashSource.REMOTE)

            logger.warning(
                "Remote splash list is %s; falling back to local splashes for this session.",
                "empty" if fetched.status is FetchStatus.EMPTY else "unavailable",
            )
            self._status(f"Remote splashes unavailable ({fetched.detail}).")
        else:
            logger.debug("Remote source disabled; skipping remote fetch.")

        local = tuple(config.local_splashes)
        if local:
            logger.info("Using %s local splashes from config.", len(local))
            self._status(f"Using {len(local)} local splashes.")
            return SplashResolution(local, SplashSource.LOCAL)

        logger.debug("No custom splashes resolved.")
        self._status("No custom splashes resolved.")
        return SplashResolution((), SplashSource.NONE)
