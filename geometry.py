from __future__ import annotations
import math
import re
from typing import Iterator, Optional

Point = tuple[float, float]

NUMBER_PATTERN = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
SEPARATOR_PATTERN = re.compile(r'[\s,]*')
FLAG_PATTERN = re.compile(r'[01](?![.eE])')

def parse_number(value) -> Optional[float]:
    """Strict-but-forgiving coercion of one attribute value.

    Surrounding whitespace is ignored. Anything that is not exactly one
    number (missing value, trailing units, garbage) gives None so the
    caller can apply its own fallback.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    value = value.strip()
    if not value:
        return None

    match = NUMBER_PATTERN.fullmatch(value)
    if not match:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number

def scan_numbers(text: str, flag_slots: tuple[int, ...] = (), group_size: int = 0) -> Iterator[float]:
    """Yield every number in a run of parameters.

    Numbers may be juxtaposed ("10-5", "0.5.5"); characters that cannot
    start a number are skipped. Positions in flag_slots (modulo
    group_size) take a lone 0/1 character, so compact arc flags such as
    "00" split. Non-finite values read as 0 to keep later slots aligned.
    """
    pos = 0
    index = 0
    length = len(text)

    while pos < length:
        pos = SEPARATOR_PATTERN.match(text, pos).end()
        if pos >= length:
            break

        if group_size and (index % group_size) in flag_slots:
            match = FLAG_PATTERN.match(text, pos)
            if match:
                yield float(match.group(0))
                index += 1
                pos = match.end()
                continue

        match = NUMBER_PATTERN.match(text, pos)
        if match is None:
            pos += 1
            continue

        number = float(match.group(0))
        yield number if math.isfinite(number) else 0.0
        index += 1
        pos = match.end()

def parse_number_list(text: Optional[str]) -> list[float]:
    if not text:
        return []
    return list(scan_numbers(text))

def reflect(point: Point, about: Point) -> Point:
    return (2 * about[0] - point[0], 2 * about[1] - point[1])

def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])

def format_number(value: Optional[float]) -> str:
    if value is None:
        return "None"
    return f"{value:g}"
