from __future__ import annotations

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

from .config import AppConfig, load_config
from .distance import DistanceResolver, LookupProbe, price_of, random_probe
from .models import RankedEvent
from .ranking import (
    nearest_events,
    nearest_events_cached,
    nearest_events_failsafe,
    same_city_events,
    sort_by_price,
)
from .report import emit_report, format_line

CONFIG_ENV_VAR = "EVENTMAILER_CONFIG"

logger = logging.getLogger(__name__)


def build_report(cfg: AppConfig, probe: Optional[LookupProbe] = None) -> List[List[str]]:
    """Run every enabled pass and return one list of report lines per pass."""
    customer = cfg.customer
    events = cfg.events
    k = cfg.ranking.top_k
    # one cache per run, shared by the cached and failsafe passes
    resolver = DistanceResolver(customer.city)

    def lines(ranked: List[RankedEvent]) -> List[str]:
        return [format_line(customer, r) for r in ranked]

    sections: List[List[str]] = []
    for name in cfg.report.sections:
        if name == "same_city":
            sections.append(lines(same_city_events(customer, events)))
        elif name == "nearest":
            sections.append(lines(nearest_events(customer, events, k)))
        elif name == "nearest_cached":
            sections.append(lines(nearest_events_cached(customer, events, resolver, k)))
        elif name == "nearest_failsafe":
            if not cfg.failsafe.enabled:
                logger.info("Failsafe ranking disabled; skipping")
                continue
            if probe is None:
                probe = random_probe(cfg.failsafe.failure_rate, cfg.failsafe.seed)
            ranked = nearest_events_failsafe(
                customer,
                events,
                resolver,
                probe,
                k,
                retries=cfg.failsafe.retries,
                fallback=cfg.failsafe.fallback,
            )
            sections.append(lines(ranked))
        elif name == "by_price":
            sections.append([
                format_line(customer, RankedEvent(event=e, distance=resolver.distance_to(e.city)), price_of(e))
                for e in sort_by_price(events)
            ])

    logger.info(
        "Built %d sections for %s (%d events, %d cities cached, %d distance lookups)",
        len(sections),
        customer.name,
        len(events),
        len(resolver),
        resolver.lookups,
    )
    return sections


def run_once(config_path: Optional[str] = None, seed: Optional[int] = None) -> None:
    load_dotenv()
    cfg = load_config(config_path or os.environ.get(CONFIG_ENV_VAR))
    if seed is not None:
        cfg.failsafe.seed = seed
    sections = build_report(cfg)
    emit_report(sections, separator=cfg.report.separator)


def main():
    import argparse

    ap = argparse.ArgumentParser(description="Print event recommendations for a customer")
    ap.add_argument("--config", default=None, help=f"YAML config path (default: ${CONFIG_ENV_VAR} or built-in sample)")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the failsafe lookup simulation")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    run_once(config_path=args.config, seed=args.seed)


if __name__ == "__main__":
    main()
