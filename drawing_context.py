from __future__ import annotations
import math
from typing import Optional
from colors import RGBA

class TransformMatrix:
    """2x3 affine matrix [a c e; b d f] acting on column vectors."""

    def __init__(self, a: float = 1.0, b: float = 0.0, c: float = 0.0,
                 d: float = 1.0, e: float = 0.0, f: float = 0.0):
        self.a = a
        self.b = b
        self.c = c
        self.d = d
        self.e = e
        self.f = f

    @staticmethod
    def identity() -> 'TransformMatrix':
        return TransformMatrix(1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

    @staticmethod
    def translate(tx: float, ty: float = 0.0) -> 'TransformMatrix':
        return TransformMatrix(1.0, 0.0, 0.0, 1.0, tx, ty)

    @staticmethod
    def scale(sx: float, sy: Optional[float] = None) -> 'TransformMatrix':
        if sy is None:
            sy = sx
        return TransformMatrix(sx, 0.0, 0.0, sy, 0.0, 0.0)

    @staticmethod
    def rotate(angle_degrees: float, cx: float = 0.0, cy: float = 0.0) -> 'TransformMatrix':
        angle_rad = math.radians(angle_degrees)
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)

        r = TransformMatrix(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)
        if cx != 0.0 or cy != 0.0:
            t1 = TransformMatrix.translate(-cx, -cy)
            t2 = TransformMatrix.translate(cx, cy)
            return t2.multiply(r).multiply(t1)
        return r

    @staticmethod
    def skew_x(angle_degrees: float) -> 'TransformMatrix':
        return TransformMatrix(1.0, 0.0, math.tan(math.radians(angle_degrees)), 1.0, 0.0, 0.0)

    @staticmethod
    def skew_y(angle_degrees: float) -> 'TransformMatrix':
        return TransformMatrix(1.0, math.tan(math.radians(angle_degrees)), 0.0, 1.0, 0.0, 0.0)

    def multiply(self, other: 'TransformMatrix') -> 'TransformMatrix':
        """self * other: other is applied to a point first."""
        return TransformMatrix(
            self.a * other.a + self.c * other.b,
            self.b * other.a + self.d * other.b,
            self.a * other.c + self.c * other.d,
            self.b * other.c + self.d * other.d,
            self.a * other.e + self.c * other.f + self.e,
            self.b * other.e + self.d * other.f + self.f
        )

    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def length_scale(self) -> float:
        return math.sqrt(abs(self.determinant()))

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        new_x = self.a * x + self.c * y + self.e
        new_y = self.b * x + self.d * y + self.f
        return (new_x, new_y)

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    def copy(self) -> 'TransformMatrix':
        return TransformMatrix(self.a, self.b, self.c, self.d, self.e, self.f)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TransformMatrix):
            return NotImplemented
        return all(abs(x - y) < 1e-9 for x, y in zip(self.as_tuple(), other.as_tuple()))

    def __repr__(self) -> str:
        return "TransformMatrix(%g, %g, %g, %g, %g, %g)" % self.as_tuple()

class DrawingContext:
    """Current canvas state saved and restored by push/pop."""

    def __init__(self):
        self.transform = TransformMatrix.identity()
        self.fill_color: Optional[RGBA] = (0, 0, 0, 255)
        self.stroke_color: Optional[RGBA] = None
        self.stroke_width = 1.0

    def push(self) -> 'DrawingContext':
        new_ctx = DrawingContext()
        new_ctx.transform = self.transform.copy()
        new_ctx.fill_color = self.fill_color
        new_ctx.stroke_color = self.stroke_color
        new_ctx.stroke_width = self.stroke_width
        return new_ctx

    def apply(self, matrix: TransformMatrix):
        self.transform = self.transform.multiply(matrix)
