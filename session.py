from __future__ import annotations
import logging
from typing import Callable, Optional
from config import RenderOptions
from document import Document, LoadResult, load_document

logger = logging.getLogger(__name__)

class DocumentSession:
    """Holds the active document; a replacement is swapped in only once fully built."""

    def __init__(self, options: Optional[RenderOptions] = None):
        self.options = options or RenderOptions()
        self.document: Optional[Document] = None
        self.surface_size: Optional[tuple[int, int]] = None
        self.dirty = False
        self.frames_rendered = 0

    def load_markup(self, text: str) -> LoadResult:
        result = load_document(text, self.options.default_size)
        if not result.ok:
            return result

        self.document = result.document
        if self.surface_size is None:
            self.surface_size = (int(round(self.document.width)), int(round(self.document.height)))
        self.dirty = True
        logger.debug("Active document replaced")
        return result

    def resize(self, width: int, height: int) -> bool:
        size = (int(width), int(height))
        if size == self.surface_size:
            return False
        self.surface_size = size
        self.dirty = True
        return True

    def invalidate(self):
        self.dirty = True

    def render_frame(self, canvas_factory: Callable[[int, int], object]):
        # None when the frame was skipped
        if not self.dirty or self.document is None:
            return None

        document = self.document
        width, height = self.surface_size
        canvas = canvas_factory(width, height)
        document.draw(canvas)

        self.dirty = False
        self.frames_rendered += 1
        return canvas

    def debug_lines(self) -> list[str]:
        if self.document is None:
            return []
        return self.document.collect_debug_info()
