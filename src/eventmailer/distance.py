from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Optional

from .models import Event

logger = logging.getLogger(__name__)

DistanceFn = Callable[[str, str], int]
LookupProbe = Callable[[], bool]


def alphabetical_distance(s: str, t: str) -> int:
    """Toy distance between two strings based on character codes.

    Positions shared by both strings contribute the absolute difference of
    their code points; the tail of the longer string contributes its raw
    code points.
    """
    common = min(len(s), len(t))
    result = 0
    for i in range(common):
        result += abs(ord(s[i]) - ord(t[i]))
    longer = s if len(s) > len(t) else t
    for ch in longer[common:]:
        result += ord(ch)
    return result


def get_distance(from_city: str, to_city: str) -> int:
    return alphabetical_distance(from_city, to_city)


def estimate_price(event: Event) -> int:
    return (alphabetical_distance(event.city, "") + alphabetical_distance(event.name, "")) // 10


def price_of(event: Event) -> int:
    if event.price is not None:
        return event.price
    return estimate_price(event)


class DistanceResolver:
    """Resolves distance from one origin city with simple in-memory caching."""

    def __init__(self, origin: str, distance: DistanceFn = get_distance) -> None:
        self.origin = origin
        self._distance = distance
        self._cache: Dict[str, int] = {}
        self.lookups = 0

    def distance_to(self, city: str) -> int:
        if city in self._cache:
            return self._cache[city]

        value = self._distance(self.origin, city)
        self.lookups += 1
        self._cache[city] = value
        return value

    def __len__(self) -> int:
        return len(self._cache)


def random_probe(failure_rate: float = 0.25, seed: Optional[int] = None) -> LookupProbe:
    """Return a probe reporting whether a distance lookup succeeded.

    Each call is an independent trial failing with ``failure_rate``. A ``None``
    seed leaves seeding to ``random.Random``, which draws from the operating
    system's entropy source (or the current time where that is unavailable).
    """
    if not 0.0 <= failure_rate <= 1.0:
        raise ValueError(f"failure_rate must be within [0, 1], got {failure_rate!r}")
    rng = random.Random(seed)

    def probe() -> bool:
        return rng.random() >= failure_rate

    return probe


def lookup_succeeded(probe: LookupProbe, retries: int = 0) -> bool:
    for attempt in range(retries + 1):
        if probe():
            return True
        if attempt < retries:
            logger.debug("Distance lookup failed; retry %d of %d", attempt + 1, retries)
    return False
