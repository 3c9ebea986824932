from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union
from drawing_context import TransformMatrix
from geometry import parse_number_list

logger = logging.getLogger(__name__)

transform_pattern = re.compile(
    r'(matrix|translate|rotate|scale|skewX|skewY)\s*\(([^)]*)\)',
    re.IGNORECASE
)

@dataclass(frozen=True)
class Translate:
    dx: float
    dy: float = 0.0

    def to_matrix(self) -> TransformMatrix:
        return TransformMatrix.translate(self.dx, self.dy)

@dataclass(frozen=True)
class Rotate:
    degrees: float
    cx: float = 0.0
    cy: float = 0.0

    def to_matrix(self) -> TransformMatrix:
        return TransformMatrix.rotate(self.degrees, self.cx, self.cy)

@dataclass(frozen=True)
class Scale:
    sx: float
    sy: float

    def to_matrix(self) -> TransformMatrix:
        return TransformMatrix.scale(self.sx, self.sy)

@dataclass(frozen=True)
class SkewX:
    degrees: float

    def to_matrix(self) -> TransformMatrix:
        return TransformMatrix.skew_x(self.degrees)

@dataclass(frozen=True)
class SkewY:
    degrees: float

    def to_matrix(self) -> TransformMatrix:
        return TransformMatrix.skew_y(self.degrees)

@dataclass(frozen=True)
class Matrix:
    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    def to_matrix(self) -> TransformMatrix:
        return TransformMatrix(self.a, self.b, self.c, self.d, self.e, self.f)

TransformOp = Union[Translate, Rotate, Scale, SkewX, SkewY, Matrix]

def _make_op(func_name: str, params: list[float]) -> Optional[TransformOp]:
    if not params:
        return None

    if func_name == 'translate':
        return Translate(params[0], params[1] if len(params) > 1 else 0.0)

    if func_name == 'rotate':
        if len(params) >= 3:
            return Rotate(params[0], params[1], params[2])
        return Rotate(params[0])

    if func_name == 'scale':
        return Scale(params[0], params[1] if len(params) > 1 else params[0])

    if func_name == 'skewx':
        return SkewX(params[0])

    if func_name == 'skewy':
        return SkewY(params[0])

    if func_name == 'matrix' and len(params) >= 6:
        return Matrix(*params[:6])

    return None

def parse_transform(transform_str: Optional[str]) -> tuple[TransformOp, ...]:
    if not transform_str:
        return ()

    ops = []
    for func_name, params_str in transform_pattern.findall(transform_str):
        op = _make_op(func_name.lower(), parse_number_list(params_str))
        if op is None:
            logger.debug("Ignoring transform function %s(%s)", func_name, params_str)
            continue
        ops.append(op)

    return tuple(ops)

def compose(ops: Sequence[TransformOp], base: Optional[TransformMatrix] = None) -> TransformMatrix:
    # base * op1 * op2 * ...; the last-listed op acts on a point first
    matrix = base.copy() if base is not None else TransformMatrix.identity()
    for op in ops:
        matrix = matrix.multiply(op.to_matrix())
    return matrix

def apply_to_point(ops: Sequence[TransformOp], x: float, y: float) -> tuple[float, float]:
    return compose(ops).transform_point(x, y)
