from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Optional
from drawing_context import TransformMatrix
from elements import Group
from geometry import format_number, parse_number
from parser import SVGParseError, parse_svg_text
from style import DEFAULT_STYLE

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 400.0

ViewBox = tuple[float, float, float, float]

viewbox_separator = re.compile(r'[\s,]+')

def parse_viewbox(value: Optional[str], width: float, height: float) -> ViewBox:
    """Four numbers with a positive size, otherwise the document's own box."""
    tokens = viewbox_separator.split(value.strip()) if value else []
    numbers = [parse_number(token) for token in tokens]
    if len(numbers) != 4 or None in numbers:
        return (0.0, 0.0, width, height)
    if numbers[2] > 0 and numbers[3] > 0:
        return (numbers[0], numbers[1], numbers[2], numbers[3])
    return (0.0, 0.0, width, height)

@dataclass(frozen=True)
class Document:
    width: float
    height: float
    viewbox: ViewBox
    root: Group
    viewbox_source: Optional[str] = None

    @classmethod
    def from_source(cls, source, default_size: float = DEFAULT_SIZE) -> 'Document':
        width = source.get_number('width')
        height = source.get_number('height')
        if width is None or width <= 0:
            width = default_size
        if height is None or height <= 0:
            height = default_size

        viewbox_source = source.get_string('viewBox')
        viewbox = parse_viewbox(viewbox_source, width, height)
        root = Group.from_source(source, DEFAULT_STYLE)

        logger.debug("Built document %gx%g, viewBox %s, %d top-level nodes",
                     width, height, viewbox, len(root.children))
        return cls(width, height, viewbox, root, viewbox_source)

    @classmethod
    def from_markup(cls, text: str, default_size: float = DEFAULT_SIZE) -> 'Document':
        return cls.from_source(parse_svg_text(text), default_size)

    def scale_factors(self, surface_width: float, surface_height: float) -> tuple[float, float]:
        _, _, vb_width, vb_height = self.viewbox
        return (surface_width / vb_width, surface_height / vb_height)

    def viewbox_transform(self, surface_width: float, surface_height: float) -> TransformMatrix:
        """Scale to the surface, after moving the viewBox origin to 0,0."""
        min_x, min_y, _, _ = self.viewbox
        sx, sy = self.scale_factors(surface_width, surface_height)
        return TransformMatrix.scale(sx, sy).multiply(TransformMatrix.translate(-min_x, -min_y))

    def draw(self, canvas):
        canvas.push_state()
        try:
            self.root.draw(canvas, self.viewbox_transform(canvas.width, canvas.height))
        finally:
            canvas.pop_state()

    def collect_debug_info(self) -> list[str]:
        lines = [f"Root: width={format_number(self.width)}, height={format_number(self.height)}"]
        if self.viewbox_source:
            lines.append(f'viewBox="{self.viewbox_source}"')
        return lines + self.root.collect_debug_info()

@dataclass(frozen=True)
class LoadResult:
    document: Optional[Document] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.document is not None

def load_document(text: str, default_size: float = DEFAULT_SIZE) -> LoadResult:
    """Ingest raw markup; failures come back in the result instead of raising."""
    try:
        document = Document.from_markup(text, default_size)
    except SVGParseError as e:
        logger.warning("Could not load document: %s", e)
        return LoadResult(error=str(e))
    return LoadResult(document=document)
