from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Union
from arc import arc_to_bezier
from drawing_context import TransformMatrix
from geometry import Point, format_number, parse_number_list
from path_data import CubicTo, LineTo, PathCommand, QuadTo, Subpath, parse_path_data, split_subpaths
from style import Style, resolve_style
from transforms import TransformOp, compose, parse_transform

logger = logging.getLogger(__name__)

DEBUG_PATH_CHARS = 80
DEFAULT_STROKE_WIDTH = 1.0

def _read_transform(source) -> tuple[TransformOp, ...]:
    return parse_transform(source.get_string('transform'))

def _number(source, name: str, default: Optional[float] = None) -> Optional[float]:
    value = source.get_number(name)
    return default if value is None else value

def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0

def _prepare(canvas, style: Style, transform: tuple[TransformOp, ...], parent: TransformMatrix) -> TransformMatrix:
    matrix = compose(transform, parent)
    canvas.set_transform(matrix)
    canvas.set_fill_color(style.fill)
    canvas.set_stroke_color(style.stroke)
    canvas.set_stroke_width(DEFAULT_STROKE_WIDTH if style.stroke_width is None else style.stroke_width)
    return matrix

def _has_paint(style: Style) -> bool:
    return style.fill is not None or style.stroke is not None

def _end_path(canvas, style: Style, fillable: bool = True):
    canvas.end_path(fill=fillable and style.fill is not None, stroke=style.stroke is not None)

def _emit_arc(canvas, start: Point, end: Point, rx: float, ry: float, sweep: bool = True):
    points = arc_to_bezier(start, end, rx, ry, 0.0, False, sweep)
    for i in range(0, len(points) - 2, 3):
        (c1x, c1y), (c2x, c2y), (x, y) = points[i], points[i + 1], points[i + 2]
        canvas.cubic_curve_to(c1x, c1y, c2x, c2y, x, y)

@dataclass(frozen=True)
class Rect:
    style: Style
    transform: tuple[TransformOp, ...]
    x: float
    y: float
    width: Optional[float]
    height: Optional[float]
    rx: float = 0.0
    ry: float = 0.0

    @classmethod
    def from_source(cls, source, parent_style: Style) -> 'Rect':
        width = _number(source, 'width')
        height = _number(source, 'height')
        rx = _number(source, 'rx')
        ry = _number(source, 'ry')
        if rx is None:
            rx = ry
        if ry is None:
            ry = rx
        rx = max(0.0, rx or 0.0)
        ry = max(0.0, ry or 0.0)
        if width is not None:
            rx = min(rx, width / 2)
        if height is not None:
            ry = min(ry, height / 2)

        return cls(resolve_style(parent_style, source), _read_transform(source),
                   _number(source, 'x', 0.0), _number(source, 'y', 0.0), width, height, rx, ry)

    def is_drawable(self) -> bool:
        return _positive(self.width) and _positive(self.height)

    def draw(self, canvas, parent: TransformMatrix):
        if not self.is_drawable() or not _has_paint(self.style):
            return
        _prepare(canvas, self.style, self.transform, parent)

        if self.rx > 0 and self.ry > 0:
            self._draw_rounded(canvas)
            return

        if self.style.fill is not None:
            canvas.fill_rect(self.x, self.y, self.width, self.height)
        if self.style.stroke is not None:
            canvas.stroke_rect(self.x, self.y, self.width, self.height)

    def _draw_rounded(self, canvas):
        x, y, w, h, rx, ry = self.x, self.y, self.width, self.height, self.rx, self.ry
        canvas.begin_path()
        canvas.move_to(x + rx, y)
        canvas.line_to(x + w - rx, y)
        _emit_arc(canvas, (x + w - rx, y), (x + w, y + ry), rx, ry)
        canvas.line_to(x + w, y + h - ry)
        _emit_arc(canvas, (x + w, y + h - ry), (x + w - rx, y + h), rx, ry)
        canvas.line_to(x + rx, y + h)
        _emit_arc(canvas, (x + rx, y + h), (x, y + h - ry), rx, ry)
        canvas.line_to(x, y + ry)
        _emit_arc(canvas, (x, y + ry), (x + rx, y), rx, ry)
        canvas.close_path()
        _end_path(canvas, self.style)

    def collect_debug_info(self) -> list[str]:
        return [f"Rect: x={format_number(self.x)}, y={format_number(self.y)}, "
                f"width={format_number(self.width)}, height={format_number(self.height)}"]

@dataclass(frozen=True)
class Circle:
    style: Style
    transform: tuple[TransformOp, ...]
    cx: float
    cy: float
    r: Optional[float]

    @classmethod
    def from_source(cls, source, parent_style: Style) -> 'Circle':
        return cls(resolve_style(parent_style, source), _read_transform(source),
                   _number(source, 'cx', 0.0), _number(source, 'cy', 0.0), _number(source, 'r'))

    def is_drawable(self) -> bool:
        return _positive(self.r)

    def draw(self, canvas, parent: TransformMatrix):
        if not self.is_drawable() or not _has_paint(self.style):
            return
        _prepare(canvas, self.style, self.transform, parent)

        if self.style.fill is not None:
            canvas.fill_circle(self.cx, self.cy, self.r)
        if self.style.stroke is not None:
            canvas.stroke_circle(self.cx, self.cy, self.r)

    def collect_debug_info(self) -> list[str]:
        return [f"Circle: cx={format_number(self.cx)}, cy={format_number(self.cy)}, r={format_number(self.r)}"]

@dataclass(frozen=True)
class Ellipse:
    style: Style
    transform: tuple[TransformOp, ...]
    cx: float
    cy: float
    rx: Optional[float]
    ry: Optional[float]

    @classmethod
    def from_source(cls, source, parent_style: Style) -> 'Ellipse':
        return cls(resolve_style(parent_style, source), _read_transform(source),
                   _number(source, 'cx', 0.0), _number(source, 'cy', 0.0),
                   _number(source, 'rx'), _number(source, 'ry'))

    def is_drawable(self) -> bool:
        return _positive(self.rx) and _positive(self.ry)

    def draw(self, canvas, parent: TransformMatrix):
        if not self.is_drawable() or not _has_paint(self.style):
            return
        _prepare(canvas, self.style, self.transform, parent)

        left = (self.cx - self.rx, self.cy)
        right = (self.cx + self.rx, self.cy)
        canvas.begin_path()
        canvas.move_to(*right)
        _emit_arc(canvas, right, left, self.rx, self.ry)
        _emit_arc(canvas, left, right, self.rx, self.ry)
        canvas.close_path()
        _end_path(canvas, self.style)

    def collect_debug_info(self) -> list[str]:
        return [f"Ellipse: cx={format_number(self.cx)}, cy={format_number(self.cy)}, "
                f"rx={format_number(self.rx)}, ry={format_number(self.ry)}"]

@dataclass(frozen=True)
class Line:
    style: Style
    transform: tuple[TransformOp, ...]
    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_source(cls, source, parent_style: Style) -> 'Line':
        return cls(resolve_style(parent_style, source), _read_transform(source),
                   _number(source, 'x1', 0.0), _number(source, 'y1', 0.0),
                   _number(source, 'x2', 0.0), _number(source, 'y2', 0.0))

    def draw(self, canvas, parent: TransformMatrix):
        if self.style.stroke is None:
            return
        _prepare(canvas, self.style, self.transform, parent)
        canvas.begin_path()
        canvas.move_to(self.x1, self.y1)
        canvas.line_to(self.x2, self.y2)
        _end_path(canvas, self.style, fillable=False)

    def collect_debug_info(self) -> list[str]:
        return [f"Line: x1={format_number(self.x1)}, y1={format_number(self.y1)}, "
                f"x2={format_number(self.x2)}, y2={format_number(self.y2)}"]

@dataclass(frozen=True)
class Polyline:
    style: Style
    transform: tuple[TransformOp, ...]
    points: tuple[Point, ...]
    closed: bool = False

    @classmethod
    def from_source(cls, source, parent_style: Style, closed: bool = False) -> 'Polyline':
        numbers = parse_number_list(source.get_string('points'))
        points = tuple((numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2))
        return cls(resolve_style(parent_style, source), _read_transform(source), points, closed)

    @classmethod
    def polygon_from_source(cls, source, parent_style: Style) -> 'Polyline':
        return cls.from_source(source, parent_style, closed=True)

    def draw(self, canvas, parent: TransformMatrix):
        if len(self.points) < 2 or not _has_paint(self.style):
            return
        _prepare(canvas, self.style, self.transform, parent)
        canvas.begin_path()
        canvas.move_to(*self.points[0])
        for point in self.points[1:]:
            canvas.line_to(*point)
        if self.closed:
            canvas.close_path()
        _end_path(canvas, self.style)

    def collect_debug_info(self) -> list[str]:
        name = "Polygon" if self.closed else "Polyline"
        return [f"{name}({len(self.points)})"]

@dataclass(frozen=True)
class Path:
    """A d attribute parsed once into commands and arc-free subpaths."""
    style: Style
    transform: tuple[TransformOp, ...]
    data: Optional[str]
    commands: tuple[PathCommand, ...]
    subpaths: tuple[Subpath, ...]

    @classmethod
    def from_source(cls, source, parent_style: Style) -> 'Path':
        data = source.get_string('d')
        commands = parse_path_data(data)
        return cls(resolve_style(parent_style, source), _read_transform(source),
                   data, commands, split_subpaths(commands))

    def draw(self, canvas, parent: TransformMatrix):
        if not self.subpaths or not _has_paint(self.style):
            return
        _prepare(canvas, self.style, self.transform, parent)

        for subpath in self.subpaths:
            canvas.begin_path()
            canvas.move_to(*subpath.start)
            for segment in subpath.segments:
                if isinstance(segment, LineTo):
                    canvas.line_to(segment.x, segment.y)
                elif isinstance(segment, CubicTo):
                    canvas.cubic_curve_to(*segment.cp1, *segment.cp2, *segment.end)
                elif isinstance(segment, QuadTo):
                    canvas.quad_curve_to(*segment.cp, *segment.end)
            if subpath.closed:
                canvas.close_path()
            _end_path(canvas, self.style)

    def collect_debug_info(self) -> list[str]:
        if not self.data:
            return [f"Path({len(self.commands)}): No path data"]
        suffix = '...' if len(self.data) > DEBUG_PATH_CHARS else ''
        return [f"Path({len(self.commands)}): {self.data[:DEBUG_PATH_CHARS]}{suffix}"]

@dataclass(frozen=True)
class Group:
    style: Style
    transform: tuple[TransformOp, ...]
    children: tuple['SceneNode', ...]

    @classmethod
    def from_source(cls, source, parent_style: Style) -> 'Group':
        style = resolve_style(parent_style, source)
        children = []

        for child in source.get_children():
            try:
                node = create_shape(child, style)
            except Exception as e:
                logger.warning("Skipping <%s>, construction failed: %s", child.get_tag_name(), e)
                continue
            if node is not None:
                children.append(node)

        return cls(style, _read_transform(source), tuple(children))

    def draw(self, canvas, parent: TransformMatrix):
        matrix = compose(self.transform, parent)
        for child in self.children:
            try:
                child.draw(canvas, matrix)
            except Exception as e:
                logger.warning("Failed to draw %s: %s", type(child).__name__, e)

    def collect_debug_info(self) -> list[str]:
        lines = []
        for child in self.children:
            lines.extend(child.collect_debug_info())
        return lines

SceneNode = Union[Group, Rect, Circle, Ellipse, Line, Polyline, Path]

SHAPE_FACTORIES = {
    'g': Group.from_source,
    'rect': Rect.from_source,
    'circle': Circle.from_source,
    'ellipse': Ellipse.from_source,
    'line': Line.from_source,
    'polyline': Polyline.from_source,
    'polygon': Polyline.polygon_from_source,
    'path': Path.from_source,
}

def create_shape(source, parent_style: Style) -> Optional[SceneNode]:
    """Build the scene node for one source element, or None for unsupported tags."""
    tag = source.get_tag_name()
    factory = SHAPE_FACTORIES.get(tag)
    if factory is None:
        logger.debug("Ignoring unsupported element <%s>", tag)
        return None

    node = factory(source, parent_style)
    logger.debug("Built <%s>: %s", tag, node.style.describe())
    return node
