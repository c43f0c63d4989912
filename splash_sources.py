from __future__ import annotations

from urllib.parse import urlparse

from splash_logging import get_logger

logger = get_logger("sources")

GITHUB_HOST = "github.com"
GITHUB_RAW_HOST = "raw.githubusercontent.com"


def normalize_source_url(url: str) -> str:
    """Return a directly fetchable URL for a splash source.

    Why:
    - Users usually copy the link from the GitHub file view, e.g.
      `https://github.com/<owner>/<repo>/blob/<branch>/splashes.txt`.
    - That page is HTML; the text lives at
      `https://raw.githubusercontent.com/<owner>/<repo>/<branch>/splashes.txt`.

    Anything that isn't a GitHub blob link (raw URLs, other hosts, garbage)
    is returned as-is. Never raises.
    """

    raw = (url or "").strip()
    if not raw:
        return url

    try:
        parsed = urlparse(raw)

        host = (parsed.hostname or "").lower()
        if host != GITHUB_HOST:
            return url

        # ['', owner, repo, 'blob', branch, *rest]
        parts = (parsed.path or "").split("/")
        if len(parts) < 6 or parts[3] != "blob":
            return url

        owner, repo, branch = parts[1], parts[2], parts[4]
        if not owner or not repo or not branch:
            return url

        rest = [segment for segment in parts[5:] if segment]
        if not rest:
            return url

        normalized = f"https://{GITHUB_RAW_HOST}/{owner}/{repo}/{branch}/" + "/".join(rest)
        logger.debug("Converted GitHub blob URL %r to raw URL %r.", url, normalized)
        return normalized
    except Exception as error:
        # A bad parse must never block the fetch attempt; the fetch will fail on its own.
        logger.warning("Failed to normalize source URL %r: %s", url, error)
        return url
