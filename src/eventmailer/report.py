from __future__ import annotations
from typing import Iterable, List, Optional, TextIO
import sys

from .models import Customer, RankedEvent

DEFAULT_SEPARATOR = "----"

def _distance_clause(distance: int) -> str:
    if distance <= 0:
        return ""
    return f" ({distance} miles away)"

def _price_clause(price: Optional[int]) -> str:
    if price is None:
        return ""
    return f" for ${price}"

def format_line(customer: Customer, ranked: RankedEvent, price: Optional[int] = None) -> str:
    e = ranked.event
    return f"{customer.name}: {e.name} in {e.city}" + _distance_clause(ranked.distance) + _price_clause(price)

def emit_section(lines: Iterable[str], out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    for line in lines:
        print(line, file=out)

def emit_report(sections: List[List[str]], separator: str = DEFAULT_SEPARATOR, out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    for i, lines in enumerate(sections):
        if i > 0:
            print(separator, file=out)
        emit_section(lines, out)
