"""
Sorting, filtering and formatting for the transport, events and weather lists.

Everything here is pure and returns new lists; input order is preserved
wherever the sort key ties.
"""

import math
import re
from datetime import date, datetime
from typing import Dict, Iterable, List, Literal, Optional, Union

from tripplanner.models.entities import LocalEvent, TransportOption

SortKey = Literal["price", "duration", "departure"]

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def parse_price(price: Union[float, int, str, None]) -> float:
    """'$1,200' -> 1200.0. Anything unparseable counts as 0."""
    if price is None:
        return 0.0
    if isinstance(price, (int, float)):
        return float(price)
    cleaned = re.sub(r"[^0-9.\-]+", "", price)
    try:
        return float(cleaned) if cleaned else 0.0
    except ValueError:
        return 0.0


def parse_duration(duration: Union[float, int, str, None]) -> int:
    """'2h 30m' -> 150, '1.5h' -> 90, '150m' -> 150, 95 -> 95 (already minutes)."""
    if duration is None:
        return 0
    if isinstance(duration, (int, float)):
        return int(duration)
    hours = re.search(r"(\d+(?:\.\d+)?)\s*h", duration)
    minutes = re.search(r"(\d+)\s*m", duration)
    return (int(round(float(hours.group(1)) * 60)) if hours else 0) + (int(minutes.group(1)) if minutes else 0)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _departure_key(option: TransportOption):
    parsed = parse_datetime(option.departure)
    if parsed is None:
        return (1, 0.0)  # unparseable departures sort last
    return (0, parsed.timestamp())


def sort_transport_options(options: Iterable[TransportOption], sort_by: str = "price") -> List[TransportOption]:
    options = list(options)
    if sort_by == "price":
        return sorted(options, key=lambda o: parse_price(o.price))
    if sort_by == "duration":
        return sorted(options, key=lambda o: parse_duration(o.duration))
    if sort_by == "departure":
        return sorted(options, key=_departure_key)
    return options


def filter_transport_options(
    options: Iterable[TransportOption],
    modes: Optional[Iterable[str]] = None,
    max_price: Optional[float] = None,
    max_duration: Optional[int] = None,
) -> List[TransportOption]:
    wanted = {m.lower() for m in modes} if modes else None
    out = []
    for option in options:
        if wanted and option.mode.lower() not in wanted:
            continue
        if max_price is not None and parse_price(option.price) > max_price:
            continue
        if max_duration is not None and parse_duration(option.duration) > max_duration:
            continue
        out.append(option)
    return out


def price_floor(price_range: Optional[str]) -> float:
    """Lowest number in a price range: '$20 - $50' -> 20.0, 'Free' or missing -> 0."""
    if not price_range:
        return 0.0
    match = re.search(r"\d+(?:\.\d+)?", price_range.replace(",", ""))
    return float(match.group(0)) if match else 0.0


def event_day(event: LocalEvent) -> Optional[date]:
    parsed = parse_datetime(event.date)
    return parsed.date() if parsed else None


def filter_events(
    events: Iterable[LocalEvent],
    categories: Optional[Union[str, Iterable[str]]] = None,
    search: Optional[str] = None,
    max_price: Optional[float] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[LocalEvent]:
    if isinstance(categories, str):
        categories = [categories]
    categories = set(categories) if categories else None
    query = search.strip().lower() if search else ""

    out = []
    for event in events:
        if categories and event.category not in categories:
            continue
        if max_price is not None and price_floor(event.price_range) > max_price:
            continue
        if query and query not in event.name.lower():
            continue
        if start or end:
            day = event_day(event)
            if day is None:
                continue
            if start and day < start:
                continue
            if end and day > end:
                continue
        out.append(event)
    return out


def group_events_by_date(events: Iterable[LocalEvent]) -> Dict[str, List[LocalEvent]]:
    groups: Dict[str, List[LocalEvent]] = {}
    for event in events:
        day = event_day(event)
        key = day.isoformat() if day else event.date
        groups.setdefault(key, []).append(event)
    return groups


def event_categories(events: Iterable[LocalEvent]) -> List[str]:
    """Distinct categories in first-seen order, for the category picker."""
    return list(dict.fromkeys(e.category for e in events if e.category))


# Formatting

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def format_price(price: float, currency: str = "USD") -> str:
    symbol = _CURRENCY_SYMBOLS.get(currency.upper())
    amount = f"{price:,.2f}"
    return f"{symbol}{amount}" if symbol else f"{currency.upper()} {amount}"


def format_price_range(min_price: float, max_price: float) -> str:
    if min_price == max_price:
        return f"${min_price:g}"
    if max_price == 0:
        return "Free"
    if min_price == 0:
        return f"Up to ${max_price:g}"
    return f"${min_price:g} - ${max_price:g}"


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def format_temperature(celsius: float, unit: str = "C") -> str:
    if unit.upper() == "F":
        return f"{_round_half_up(celsius_to_fahrenheit(celsius))}°F"
    return f"{_round_half_up(celsius)}°C"
