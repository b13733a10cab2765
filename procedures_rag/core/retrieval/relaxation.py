"""
Threshold relaxation ladder.

When a search at the caller's threshold finds nothing, retry once at each
fallback threshold that is strictly lower than the original, in order.
Empty results after the last rung are a valid outcome.

Dependencies: logging (stdlib)
System role: Shared back-off policy for hybrid and vector search
"""

import logging
from typing import Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FALLBACK_THRESHOLDS: tuple[float, ...] = (0.5, 0.3)


def search_with_relaxation(
    run: Callable[[float], list[T]],
    threshold: float,
    fallbacks: Sequence[float] = DEFAULT_FALLBACK_THRESHOLDS,
) -> list[T]:
    """
    Run a thresholded search, relaxing the threshold while it returns nothing.

    Args:
        run: Executes one search pass at the given threshold
        threshold: Caller-supplied threshold
        fallbacks: Lower thresholds to try, in order

    Returns:
        list[T]: Results of the first non-empty pass, or of the last pass attempted
    """
    results = run(threshold)
    previous = threshold
    for fallback in fallbacks:
        if results:
            break
        if threshold > fallback:
            logger.info(f"{__name__}:search_with_relaxation - No results at threshold {previous}, trying {fallback}")
            results = run(fallback)
            previous = fallback
    return results
