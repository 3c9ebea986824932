from __future__ import annotations
import logging
import math
from typing import Optional
import numpy as np
from colors import RGBA, get_color_with_opacity, parse_color
from config import RenderOptions
from drawing_context import DrawingContext, TransformMatrix
from geometry import Point

logger = logging.getLogger(__name__)

# cubic control distance for a quarter circle
KAPPA = 0.5522847498307936

SAMPLE_OFFSETS = [(0.5, 0.5)]
AA_SAMPLE_OFFSETS = [(0.25, 0.25), (0.75, 0.25), (0.25, 0.75), (0.75, 0.75)]

MAX_SUBDIVISION_DEPTH = 10

def _midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)

def flatten_cubic(p0: Point, p1: Point, p2: Point, p3: Point, tolerance: float = 0.25) -> list[Point]:
    """Points along a cubic Bézier, excluding p0, by midpoint subdivision."""
    points: list[Point] = []

    def flatness(p0, p1, p2, p3):
        ux = 3 * p1[0] - 2 * p0[0] - p3[0]
        uy = 3 * p1[1] - 2 * p0[1] - p3[1]
        vx = 3 * p2[0] - 2 * p3[0] - p0[0]
        vy = 3 * p2[1] - 2 * p3[1] - p0[1]
        return max(ux * ux + uy * uy, vx * vx + vy * vy)

    def subdivide(p0, p1, p2, p3, depth=0):
        if depth > MAX_SUBDIVISION_DEPTH or flatness(p0, p1, p2, p3) < 16 * tolerance * tolerance:
            points.append(p3)
            return

        m01 = _midpoint(p0, p1)
        m12 = _midpoint(p1, p2)
        m23 = _midpoint(p2, p3)
        m012 = _midpoint(m01, m12)
        m123 = _midpoint(m12, m23)
        m0123 = _midpoint(m012, m123)

        subdivide(p0, m01, m012, m0123, depth + 1)
        subdivide(m0123, m123, m23, p3, depth + 1)

    subdivide(p0, p1, p2, p3)
    return points

def flatten_quadratic(p0: Point, p1: Point, p2: Point, tolerance: float = 0.25) -> list[Point]:
    points: list[Point] = []

    def flatness(p0, p1, p2):
        ux = 2 * p1[0] - p0[0] - p2[0]
        uy = 2 * p1[1] - p0[1] - p2[1]
        return ux * ux + uy * uy

    def subdivide(p0, p1, p2, depth=0):
        if depth > MAX_SUBDIVISION_DEPTH or flatness(p0, p1, p2) < 16 * tolerance * tolerance:
            points.append(p2)
            return

        m01 = _midpoint(p0, p1)
        m12 = _midpoint(p1, p2)
        m012 = _midpoint(m01, m12)

        subdivide(p0, m01, m012, depth + 1)
        subdivide(m012, m12, p2, depth + 1)

    subdivide(p0, p1, p2)
    return points

class Contour:
    def __init__(self, start: Point):
        self.points: list[Point] = [start]
        self.closed = False

class RasterCanvas:
    """Immediate-mode drawing surface backed by an RGBA numpy buffer.

    Geometry is mapped to device space with the current transform as it
    is emitted, curves are flattened there, and each fill or stroke is
    turned into a coverage mask that is alpha-blended onto the buffer.
    """

    def __init__(self, width: int, height: int, background: tuple[int, int, int] = (255, 255, 255),
                 anti_aliasing: bool = False, curve_tolerance: float = 0.25):
        self.width = int(width)
        self.height = int(height)
        self.anti_aliasing = anti_aliasing
        self.curve_tolerance = curve_tolerance

        self.buffer = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self.buffer[:, :, 0] = background[0]
        self.buffer[:, :, 1] = background[1]
        self.buffer[:, :, 2] = background[2]
        self.buffer[:, :, 3] = 255

        self.context_stack = [DrawingContext()]
        self._contours: list[Contour] = []

    # state

    def _get_current_context(self) -> DrawingContext:
        return self.context_stack[-1]

    def push_state(self):
        self.context_stack.append(self._get_current_context().push())

    def pop_state(self):
        if len(self.context_stack) > 1:
            self.context_stack.pop()

    def set_transform(self, matrix: TransformMatrix):
        self._get_current_context().transform = matrix.copy()

    def translate(self, dx: float, dy: float = 0.0):
        self._get_current_context().apply(TransformMatrix.translate(dx, dy))

    def rotate(self, degrees: float):
        self._get_current_context().apply(TransformMatrix.rotate(degrees))

    def scale(self, sx: float, sy: Optional[float] = None):
        self._get_current_context().apply(TransformMatrix.scale(sx, sy))

    def set_fill_color(self, paint: Optional[str]):
        self._get_current_context().fill_color = self._resolve_paint(paint)

    def set_stroke_color(self, paint: Optional[str]):
        self._get_current_context().stroke_color = self._resolve_paint(paint)

    def set_stroke_width(self, width: float):
        self._get_current_context().stroke_width = max(0.0, float(width))

    def _resolve_paint(self, paint: Optional[str]) -> Optional[RGBA]:
        color = parse_color(paint)
        if color is None:
            return None
        return get_color_with_opacity(color)

    def _to_device(self, x: float, y: float) -> Point:
        return self._get_current_context().transform.transform_point(x, y)

    # shapes

    def _rect_contour(self, x: float, y: float, w: float, h: float) -> list[Point]:
        return [self._to_device(x, y), self._to_device(x + w, y),
                self._to_device(x + w, y + h), self._to_device(x, y + h)]

    def _circle_contour(self, cx: float, cy: float, r: float) -> list[Point]:
        k = r * KAPPA
        quarters = [
            ((cx + r, cy + k), (cx + k, cy + r), (cx, cy + r)),
            ((cx - k, cy + r), (cx - r, cy + k), (cx - r, cy)),
            ((cx - r, cy - k), (cx - k, cy - r), (cx, cy - r)),
            ((cx + k, cy - r), (cx + r, cy - k), (cx + r, cy)),
        ]
        current = self._to_device(cx + r, cy)
        points = [current]
        for c1, c2, end in quarters:
            d1, d2, d3 = self._to_device(*c1), self._to_device(*c2), self._to_device(*end)
            points.extend(flatten_cubic(current, d1, d2, d3, self.curve_tolerance))
            current = d3
        return points

    def fill_rect(self, x: float, y: float, w: float, h: float):
        self._fill([self._rect_contour(x, y, w, h)])

    def stroke_rect(self, x: float, y: float, w: float, h: float):
        self._stroke([(self._rect_contour(x, y, w, h), True)])

    def fill_circle(self, cx: float, cy: float, r: float):
        self._fill([self._circle_contour(cx, cy, r)])

    def stroke_circle(self, cx: float, cy: float, r: float):
        self._stroke([(self._circle_contour(cx, cy, r), True)])

    # paths

    def begin_path(self):
        self._contours = []

    def _current_contour(self) -> Contour:
        if not self._contours:
            self._contours.append(Contour(self._to_device(0.0, 0.0)))
        return self._contours[-1]

    def move_to(self, x: float, y: float):
        self._contours.append(Contour(self._to_device(x, y)))

    def line_to(self, x: float, y: float):
        self._current_contour().points.append(self._to_device(x, y))

    def cubic_curve_to(self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float):
        contour = self._current_contour()
        p0 = contour.points[-1]
        contour.points.extend(flatten_cubic(p0, self._to_device(cp1x, cp1y), self._to_device(cp2x, cp2y),
                                            self._to_device(x, y), self.curve_tolerance))

    def quad_curve_to(self, cpx: float, cpy: float, x: float, y: float):
        contour = self._current_contour()
        p0 = contour.points[-1]
        contour.points.extend(flatten_quadratic(p0, self._to_device(cpx, cpy), self._to_device(x, y),
                                                self.curve_tolerance))

    def close_path(self):
        if self._contours:
            self._contours[-1].closed = True

    def end_path(self, fill: bool = True, stroke: bool = True):
        contours, self._contours = self._contours, []
        if fill:
            self._fill([c.points for c in contours])
        if stroke:
            self._stroke([(c.points, c.closed) for c in contours])

    # rasterization

    def _bounds(self, points: list[Point], pad: float = 0.0) -> Optional[tuple[int, int, int, int]]:
        arr = np.asarray(points, dtype=np.float64)
        if arr.size == 0 or not np.all(np.isfinite(arr)):
            return None
        x0 = max(0, int(math.floor(arr[:, 0].min() - pad)))
        y0 = max(0, int(math.floor(arr[:, 1].min() - pad)))
        x1 = min(self.width, int(math.ceil(arr[:, 0].max() + pad)) + 1)
        y1 = min(self.height, int(math.ceil(arr[:, 1].max() + pad)) + 1)
        if x0 >= x1 or y0 >= y1:
            return None
        return x0, y0, x1, y1

    def _sample_offsets(self):
        return AA_SAMPLE_OFFSETS if self.anti_aliasing else SAMPLE_OFFSETS

    def _fill(self, polygons: list[list[Point]]):
        color = self._get_current_context().fill_color
        polygons = [p for p in polygons if len(p) >= 3]
        if color is None or color[3] == 0 or not polygons:
            return

        bounds = self._bounds([pt for poly in polygons for pt in poly])
        if bounds is None:
            return
        x0, y0, x1, y1 = bounds

        offsets = self._sample_offsets()
        coverage = np.zeros((y1 - y0, x1 - x0), dtype=np.float32)
        for ox, oy in offsets:
            xs = np.arange(x0, x1, dtype=np.float64) + ox
            ys = np.arange(y0, y1, dtype=np.float64) + oy
            coverage += self._nonzero_mask(polygons, xs, ys)
        coverage /= len(offsets)

        self._blend(coverage, bounds, color)

    def _nonzero_mask(self, polygons: list[list[Point]], xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Nonzero winding test of every (xs, ys) sample, by rays cast to +x."""
        winding = np.zeros((len(ys), len(xs)), dtype=np.int32)

        for poly in polygons:
            for (xa, ya), (xb, yb) in zip(poly, poly[1:] + poly[:1]):
                if ya == yb:
                    continue
                lo, hi = min(ya, yb), max(ya, yb)
                r0 = int(np.searchsorted(ys, lo, side='left'))
                r1 = int(np.searchsorted(ys, hi, side='left'))
                if r0 >= r1:
                    continue

                y = ys[r0:r1, None]
                x_cross = xa + (y - ya) * (xb - xa) / (yb - ya)
                direction = 1 if yb > ya else -1
                winding[r0:r1] += np.where(xs[None, :] < x_cross, direction, 0).astype(np.int32)

        return (winding != 0).astype(np.float32)

    def _stroke(self, polylines: list[tuple[list[Point], bool]]):
        ctx = self._get_current_context()
        color = ctx.stroke_color
        if color is None or color[3] == 0 or ctx.stroke_width <= 0:
            return

        half_width = max(0.5, ctx.stroke_width * ctx.transform.length_scale() / 2)

        segments = []
        for points, closed in polylines:
            if len(points) < 2:
                continue
            path = points + [points[0]] if closed else points
            segments.extend(zip(path, path[1:]))
        if not segments:
            return

        bounds = self._bounds([pt for seg in segments for pt in seg], pad=half_width + 1)
        if bounds is None:
            return
        x0, y0, x1, y1 = bounds

        coverage = np.zeros((y1 - y0, x1 - x0), dtype=np.float32)
        xs = np.arange(x0, x1, dtype=np.float64) + 0.5
        ys = np.arange(y0, y1, dtype=np.float64) + 0.5

        for (ax, ay), (bx, by) in segments:
            seg_bounds = self._bounds([(ax, ay), (bx, by)], pad=half_width + 1)
            if seg_bounds is None:
                continue
            c0, r0 = seg_bounds[0] - x0, seg_bounds[1] - y0
            c1, r1 = seg_bounds[2] - x0, seg_bounds[3] - y0

            px = xs[c0:c1][None, :]
            py = ys[r0:r1][:, None]
            dx, dy = bx - ax, by - ay
            length_sq = dx * dx + dy * dy
            if length_sq == 0:
                t = np.zeros((1, 1))
            else:
                t = np.clip(((px - ax) * dx + (py - ay) * dy) / length_sq, 0.0, 1.0)
            dist = np.hypot(px - (ax + t * dx), py - (ay + t * dy))

            if self.anti_aliasing:
                segment_coverage = np.clip(half_width + 0.5 - dist, 0.0, 1.0)
            else:
                segment_coverage = (dist <= half_width).astype(np.float32)

            region = coverage[r0:r1, c0:c1]
            np.maximum(region, segment_coverage, out=region)

        self._blend(coverage, bounds, color)

    def _blend(self, coverage: np.ndarray, bounds: tuple[int, int, int, int], color: RGBA):
        """Source-over composite of color, weighted by coverage, onto the buffer."""
        x0, y0, x1, y1 = bounds
        alpha = (coverage * (color[3] / 255.0))[..., None]
        if not np.any(alpha):
            return

        region = self.buffer[y0:y1, x0:x1].astype(np.float32)
        dst_alpha = region[..., 3:4] / 255.0
        out_alpha = alpha + dst_alpha * (1.0 - alpha)

        src = np.array(color[:3], dtype=np.float32)
        safe_alpha = np.where(out_alpha == 0, 1.0, out_alpha)
        rgb = (src * alpha + region[..., :3] * dst_alpha * (1.0 - alpha)) / safe_alpha

        self.buffer[y0:y1, x0:x1, :3] = np.clip(np.round(rgb), 0, 255).astype(np.uint8)
        self.buffer[y0:y1, x0:x1, 3] = np.clip(np.round(out_alpha[..., 0] * 255), 0, 255).astype(np.uint8)

    # output

    def get_rgb_buffer(self) -> np.ndarray:
        return self.buffer[:, :, 0:3].copy()

    def get_rgba_buffer(self) -> np.ndarray:
        return self.buffer.copy()

    def to_image(self):
        from PIL import Image
        return Image.fromarray(self.get_rgb_buffer(), 'RGB')

    def save(self, path: str):
        self.to_image().save(path)

def surface_size(document, options: RenderOptions) -> tuple[int, int]:
    width = options.width if options.width else int(round(document.width))
    height = options.height if options.height else int(round(document.height))
    return max(1, width), max(1, height)

def render_document(document, options: Optional[RenderOptions] = None) -> RasterCanvas:
    options = options or RenderOptions()
    width, height = surface_size(document, options)
    canvas = RasterCanvas(width, height, options.background, options.anti_aliasing, options.curve_tolerance)
    document.draw(canvas)
    logger.debug("Rendered document onto %dx%d surface", width, height)
    return canvas
