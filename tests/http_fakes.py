from __future__ import annotations

from dataclasses import dataclass, field
import threading
import time
from typing import Any, Callable, Iterator


@dataclass
class FakeResponse:
    status_code: int = 200
    text: str = ""
    content_bytes: bytes | None = None
    chunk_size: int | None = None
    chunk_delay: float = 0.0
    closed: bool = False

    @property
    def content(self) -> bytes:
        if self.content_bytes is not None:
            return self.content_bytes
        return self.text.encode("utf-8")

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        data = self.content
        step = self.chunk_size or chunk_size
        for start in range(0, len(data), step):
            if self.chunk_delay:
                time.sleep(self.chunk_delay)
            yield data[start : start + step]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass
class FakeSession:
    """Stands in for `requests.Session`; records every GET."""

    response: FakeResponse | Exception = field(default_factory=FakeResponse)
    before_response: Callable[[], None] | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)
    closed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        with self._lock:
            self.calls.append({"url": url, **kwargs})

        if self.before_response is not None:
            self.before_response()

        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def close(self) -> None:
        self.closed = True

    @property
    def urls(self) -> list[str]:
        return [call["url"] for call in self.calls]
