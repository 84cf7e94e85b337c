from __future__ import annotations

import logging
import sys
from typing import Dict, List

from .distance import DistanceFn, DistanceResolver, LookupProbe, get_distance, lookup_succeeded, price_of
from .models import Customer, Event, RankedEvent

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
FAILED_DISTANCE = sys.maxsize
FALLBACKS = ("max", "average")


def group_by_city(events: List[Event]) -> Dict[str, List[Event]]:
    grouped: Dict[str, List[Event]] = {}
    for e in events:
        grouped.setdefault(e.city, []).append(e)
    return grouped


def events_in_city(events: List[Event], city: str) -> List[Event]:
    return list(group_by_city(events).get(city, []))


def same_city_events(customer: Customer, events: List[Event]) -> List[RankedEvent]:
    return [
        RankedEvent(event=e, distance=get_distance(customer.city, e.city))
        for e in events_in_city(events, customer.city)
    ]


def _take_nearest(ranked: List[RankedEvent], k: int) -> List[RankedEvent]:
    # sorted() is stable, so ties keep source order
    return sorted(ranked, key=lambda r: r.distance)[:k]


def nearest_events(
    customer: Customer,
    events: List[Event],
    k: int = DEFAULT_TOP_K,
    distance: DistanceFn = get_distance,
) -> List[RankedEvent]:
    ranked = [RankedEvent(event=e, distance=distance(customer.city, e.city)) for e in events]
    return _take_nearest(ranked, k)


def nearest_events_cached(
    customer: Customer,
    events: List[Event],
    resolver: DistanceResolver,
    k: int = DEFAULT_TOP_K,
) -> List[RankedEvent]:
    if resolver.origin != customer.city:
        raise ValueError(f"Resolver origin {resolver.origin!r} does not match customer city {customer.city!r}")
    ranked = [RankedEvent(event=e, distance=resolver.distance_to(e.city)) for e in events]
    return _take_nearest(ranked, k)


def nearest_events_failsafe(
    customer: Customer,
    events: List[Event],
    resolver: DistanceResolver,
    probe: LookupProbe,
    k: int = DEFAULT_TOP_K,
    retries: int = 0,
    fallback: str = "max",
) -> List[RankedEvent]:
    """Rank by cached distance, demoting events whose lookup fails.

    A failed lookup never aborts the pass. Its event keeps the cached distance
    for the report but is marked failed and sorted on the fallback value:
    ``sys.maxsize`` for "max", or the floor mean of the successful lookups
    for "average".
    """
    if fallback not in FALLBACKS:
        raise ValueError(f"Unknown fallback {fallback!r}; expected one of {', '.join(FALLBACKS)}")
    if resolver.origin != customer.city:
        raise ValueError(f"Resolver origin {resolver.origin!r} does not match customer city {customer.city!r}")

    ranked: List[RankedEvent] = []
    for e in events:
        ok = lookup_succeeded(probe, retries)
        d = resolver.distance_to(e.city)
        if not ok:
            logger.debug("Distance lookup for %s failed; demoting %s", e.city, e.name)
        ranked.append(RankedEvent(event=e, distance=d, failed=not ok))

    fallback_distance = FAILED_DISTANCE
    if fallback == "average":
        known = [r.distance for r in ranked if not r.failed]
        if known:
            fallback_distance = sum(known) // len(known)

    def sort_key(r: RankedEvent) -> int:
        return fallback_distance if r.failed else r.distance

    return sorted(ranked, key=sort_key)[:k]


def sort_by_price(events: List[Event]) -> List[Event]:
    return sorted(events, key=price_of)
