from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional

NO_PAINT = 'none'

@dataclass(frozen=True)
class Style:
    # stroke_width None means unset; shapes then stroke at width 1
    fill: Optional[str] = 'black'
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None

    def describe(self) -> str:
        return f"fill={self.fill}, stroke={self.stroke}, stroke-width={self.stroke_width}"

DEFAULT_STYLE = Style()

def resolve_paint(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == NO_PAINT:
        return None
    return value

def resolve_style(parent: Style, source) -> Style:
    overrides = {}

    if source.has_attribute('fill'):
        overrides['fill'] = resolve_paint(source.get_string('fill'))

    if source.has_attribute('stroke'):
        overrides['stroke'] = resolve_paint(source.get_string('stroke'))

    if source.has_attribute('stroke-width'):
        width = source.get_number('stroke-width')
        if width is not None and width >= 0:
            overrides['stroke_width'] = width

    if not overrides:
        return parent
    return replace(parent, **overrides)
