"""Shared test fixtures."""

from __future__ import annotations

import pytest

from drawing_context import TransformMatrix
from geometry import parse_number


BASIC_SVG = '''<?xml version="1.0" encoding="UTF-8"?>
<!-- two shapes and a path -->
<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100">
  <rect x="10" y="10" width="80" height="40" fill="#4ECDC4"/>
  <circle cx="150" cy="50" r="20" fill="red" stroke="black" stroke-width="2"/>
  <path d="M10 90 L190 90 Z" stroke="blue" fill="none"/>
</svg>'''

GROUP_SVG = '''<svg width="100" height="100" viewBox="0 0 50 50">
  <g fill="red" transform="translate(10,0) scale(2)">
    <rect width="5" height="5"/>
    <rect width="5" height="5" fill="none" stroke="green"/>
    <foo/>
    <circle cx="10" cy="10" r="3"/>
  </g>
</svg>'''

SMILEY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <circle cx="12" cy="12" r="10"/>
  <circle cx="8" cy="9" r="1"/>
  <circle cx="16" cy="9" r="1"/>
  <path d="M8 14s1.5 2 4 2 4-2 4-2"/>
</svg>'''

HOME_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">
  <path d="M15 21v-8a1 1 0 0 0-1-1h-4a1 1 0 0 0-1 1v8"/>
  <path d="M3 10a2 2 0 0 1 .709-1.528l7-5.999a2 2 0 0 1 2.582 0l7 5.999A2 2 0 0 1 21 10v9a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z"/>
</svg>'''

SOLID_SQUARE_SVG = '''<svg width="20" height="20">
  <rect x="5" y="5" width="10" height="10" fill="#ff0000"/>
</svg>'''


class FakeSource:
    """Minimal attribute source built from a dict, for tests that skip markup."""

    def __init__(self, tag: str, attributes: dict | None = None, children: list | None = None):
        self.tag = tag
        self.attributes = dict(attributes or {})
        self.children = list(children or [])

    def get_tag_name(self) -> str:
        return self.tag

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_string(self, name: str):
        return self.attributes.get(name)

    def get_number(self, name: str):
        return parse_number(self.attributes.get(name))

    def get_children(self) -> list:
        return list(self.children)


class RecordingCanvas:
    """Canvas that records every primitive call as a tuple."""

    def __init__(self, width: int = 100, height: int = 100):
        self.width = width
        self.height = height
        self.calls: list[tuple] = []
        self.transform = TransformMatrix.identity()
        self.depth = 0

    def _record(self, *call):
        self.calls.append(call)

    def push_state(self):
        self.depth += 1
        self._record('push_state')

    def pop_state(self):
        self.depth -= 1
        self._record('pop_state')

    def set_transform(self, matrix):
        self.transform = matrix.copy()
        self._record('set_transform', matrix.as_tuple())

    def translate(self, dx, dy=0.0):
        self._record('translate', dx, dy)

    def rotate(self, degrees):
        self._record('rotate', degrees)

    def scale(self, sx, sy=None):
        self._record('scale', sx, sy)

    def set_fill_color(self, paint):
        self._record('set_fill_color', paint)

    def set_stroke_color(self, paint):
        self._record('set_stroke_color', paint)

    def set_stroke_width(self, width):
        self._record('set_stroke_width', width)

    def fill_rect(self, x, y, w, h):
        self._record('fill_rect', x, y, w, h)

    def stroke_rect(self, x, y, w, h):
        self._record('stroke_rect', x, y, w, h)

    def fill_circle(self, cx, cy, r):
        self._record('fill_circle', cx, cy, r)

    def stroke_circle(self, cx, cy, r):
        self._record('stroke_circle', cx, cy, r)

    def begin_path(self):
        self._record('begin_path')

    def move_to(self, x, y):
        self._record('move_to', x, y)

    def line_to(self, x, y):
        self._record('line_to', x, y)

    def cubic_curve_to(self, cp1x, cp1y, cp2x, cp2y, x, y):
        self._record('cubic_curve_to', cp1x, cp1y, cp2x, cp2y, x, y)

    def quad_curve_to(self, cpx, cpy, x, y):
        self._record('quad_curve_to', cpx, cpy, x, y)

    def close_path(self):
        self._record('close_path')

    def end_path(self, fill=True, stroke=True):
        self._record('end_path', fill, stroke)

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def shape_calls(self) -> list[tuple]:
        drawing = {'fill_rect', 'stroke_rect', 'fill_circle', 'stroke_circle', 'end_path'}
        return [call for call in self.calls if call[0] in drawing]


@pytest.fixture
def canvas() -> RecordingCanvas:
    return RecordingCanvas()

