from __future__ import annotations

import random
from typing import Optional, Sequence

from splash_logging import get_logger
from splash_resolver import SourceConfig, SplashResolver

logger = get_logger("menu")

# Shown when neither the remote nor the local source yields anything.
VANILLA_SPLASHES: tuple[str, ...] = (
    "Also try Terraria!",
    "Made in Python!",
    "100% pure!",
    "Splash!",
)


def prepare_splashes(
    resolver: SplashResolver,
    config: SourceConfig,
    vanilla: Sequence[str] = VANILLA_SPLASHES,
) -> tuple[str, ...]:
    """Return the override list, or the built-in list when nothing resolved."""

    override = resolver.resolve(config)
    if override:
        logger.info("Overriding default splashes with %s custom entries.", len(override))
        return override

    logger.debug("Custom splash list is empty; using default splashes.")
    return tuple(vanilla)


def pick_splash(splashes: Sequence[str], rng: Optional[random.Random] = None) -> str | None:
    if not splashes:
        return None
    return (rng or random).choice(splashes)
