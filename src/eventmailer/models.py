from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class Event:
    name: str
    city: str
    price: Optional[int] = None     # estimated from name/city when absent

@dataclass(frozen=True)
class Customer:
    name: str
    city: str

@dataclass(frozen=True)
class RankedEvent:
    event: Event
    distance: int
    failed: bool = False            # lookup failed; ranked on the fallback distance
