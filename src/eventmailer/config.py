from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from .models import Customer, Event
from .ranking import DEFAULT_TOP_K, FALLBACKS

SECTIONS = ("same_city", "nearest", "nearest_cached", "nearest_failsafe", "by_price")

DEFAULT_CUSTOMER = {"name": "Mr. Fake", "city": "New York"}

DEFAULT_EVENTS: List[Dict[str, Any]] = [
    {"name": "Phantom of the Opera", "city": "New York", "price": 1},
    {"name": "Metallica", "city": "Los Angeles", "price": 6},
    {"name": "Metallica", "city": "New York", "price": 7},
    {"name": "Metallica", "city": "Boston", "price": 9},
    {"name": "LadyGaGa", "city": "New York", "price": 8},
    {"name": "LadyGaGa", "city": "Boston", "price": 5},
    {"name": "LadyGaGa", "city": "Chicago", "price": 3},
    {"name": "LadyGaGa", "city": "San Francisco", "price": 2},
    {"name": "LadyGaGa", "city": "Washington", "price": 5},
]


class ConfigError(ValueError):
    pass


@dataclass
class RankingConfig:
    top_k: int = DEFAULT_TOP_K

@dataclass
class FailsafeConfig:
    enabled: bool = True
    failure_rate: float = 0.25
    retries: int = 0
    fallback: str = "max"
    seed: Optional[int] = None

@dataclass
class ReportConfig:
    separator: str = "----"
    sections: List[str] = field(default_factory=lambda: list(SECTIONS))

@dataclass
class AppConfig:
    customer: Customer
    events: List[Event]
    ranking: RankingConfig
    failsafe: FailsafeConfig
    report: ReportConfig


def _parse_customer(data: Any) -> Customer:
    if not isinstance(data, dict):
        raise ConfigError(f"customer must be a mapping, got {data!r}")
    name = data.get("name")
    city = data.get("city")
    if not name or not city:
        raise ConfigError(f"Customer needs both name and city: {data!r}")
    return Customer(name=str(name), city=str(city))


def _parse_event(index: int, data: Any) -> Event:
    if not isinstance(data, dict):
        raise ConfigError(f"Event #{index} must be a mapping, got {data!r}")
    name = data.get("name")
    city = data.get("city")
    if not name or not city:
        raise ConfigError(f"Event #{index} needs both name and city: {data!r}")
    price = data.get("price")
    if price is not None:
        if isinstance(price, bool) or not isinstance(price, int):
            raise ConfigError(f"Event #{index} price must be an integer: {price!r}")
    return Event(name=str(name), city=str(city), price=price)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping, got {value!r}")
    return value


def _int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer: {value!r}")
    return value


def _float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number: {value!r}")
    return float(value)


def _bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false: {value!r}")
    return value


def _parse_seed(value: Any) -> Optional[int]:
    if value is None:
        return None
    return _int("failsafe.seed", value)


def config_from_dict(data: Dict[str, Any]) -> AppConfig:
    customer = data.get("customer") or DEFAULT_CUSTOMER
    events = data.get("events")
    if events is None:
        events = DEFAULT_EVENTS
    if not isinstance(events, list):
        raise ConfigError(f"events must be a list, got {events!r}")
    ranking = _section(data, "ranking")
    failsafe = _section(data, "failsafe")
    report = _section(data, "report")
    sections = report.get("sections", SECTIONS)
    if not isinstance(sections, (list, tuple)):
        raise ConfigError(f"report.sections must be a list, got {sections!r}")

    cfg = AppConfig(
        customer=_parse_customer(customer),
        events=[_parse_event(i, e) for i, e in enumerate(events)],
        ranking=RankingConfig(
            top_k=_int("ranking.top_k", ranking.get("top_k", DEFAULT_TOP_K)),
        ),
        failsafe=FailsafeConfig(
            enabled=_bool("failsafe.enabled", failsafe.get("enabled", True)),
            failure_rate=_float("failsafe.failure_rate", failsafe.get("failure_rate", 0.25)),
            retries=_int("failsafe.retries", failsafe.get("retries", 0)),
            fallback=str(failsafe.get("fallback", "max")),
            seed=_parse_seed(failsafe.get("seed")),
        ),
        report=ReportConfig(
            separator=str(report.get("separator", "----")),
            sections=list(sections),
        ),
    )

    if cfg.ranking.top_k < 0:
        raise ConfigError(f"ranking.top_k must not be negative: {cfg.ranking.top_k}")
    if not 0.0 <= cfg.failsafe.failure_rate <= 1.0:
        raise ConfigError(f"failsafe.failure_rate must be within [0, 1]: {cfg.failsafe.failure_rate}")
    if cfg.failsafe.retries < 0:
        raise ConfigError(f"failsafe.retries must not be negative: {cfg.failsafe.retries}")
    if cfg.failsafe.fallback not in FALLBACKS:
        raise ConfigError(f"Unknown failsafe.fallback {cfg.failsafe.fallback!r}")
    unknown = [s for s in cfg.report.sections if s not in SECTIONS]
    if unknown:
        raise ConfigError(f"Unknown report sections: {', '.join(map(str, unknown))}")
    return cfg


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load config from YAML, falling back to the built-in sample data."""
    if not path:
        return config_from_dict({})
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return config_from_dict(data)
