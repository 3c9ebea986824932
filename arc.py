from __future__ import annotations
import math
from dataclasses import dataclass
from geometry import Point, distance

MAX_SEGMENT_ANGLE = math.pi / 2

@dataclass(frozen=True)
class ArcParameters:
    cx: float
    cy: float
    rx: float
    ry: float
    phi: float
    theta1: float
    delta: float

    def point_at(self, theta: float) -> Point:
        cos_phi = math.cos(self.phi)
        sin_phi = math.sin(self.phi)
        x = self.rx * math.cos(theta)
        y = self.ry * math.sin(theta)
        return (self.cx + cos_phi * x - sin_phi * y,
                self.cy + sin_phi * x + cos_phi * y)

    def derivative_at(self, theta: float) -> Point:
        cos_phi = math.cos(self.phi)
        sin_phi = math.sin(self.phi)
        x = -self.rx * math.sin(theta)
        y = self.ry * math.cos(theta)
        return (cos_phi * x - sin_phi * y, sin_phi * x + cos_phi * y)

def _angle_between(ux: float, uy: float, vx: float, vy: float) -> float:
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)

def arc_center_parameters(start: Point, end: Point, rx: float, ry: float,
                          phi: float, large_arc: bool, sweep: bool) -> ArcParameters:
    # SVG implementation notes F.6.5; phi in radians
    x1, y1 = start
    x2, y2 = end
    rx = abs(rx)
    ry = abs(ry)

    # chord longer than the ellipse allows: grow both radii by the same factor
    chord = distance(start, end)
    largest = max(rx, ry)
    if chord > 2 * largest:
        factor = chord / (2 * largest)
        rx *= factor
        ry *= factor

    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)

    dx = (x1 - x2) / 2
    dy = (y1 - y2) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    lambda_val = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lambda_val > 1:
        rx *= math.sqrt(lambda_val)
        ry *= math.sqrt(lambda_val)

    numerator = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    denominator = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    # rounding can push the numerator just below zero
    factor = math.sqrt(max(0.0, numerator / denominator))
    if large_arc == sweep:
        factor = -factor

    cxp = factor * rx * y1p / ry
    cyp = -factor * ry * x1p / rx

    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    ux = (x1p - cxp) / rx
    uy = (y1p - cyp) / ry
    vx = (-x1p - cxp) / rx
    vy = (-y1p - cyp) / ry

    theta1 = _angle_between(1.0, 0.0, ux, uy)
    delta = math.fmod(_angle_between(ux, uy, vx, vy), 2 * math.pi)

    if not sweep and delta > 0:
        delta -= 2 * math.pi
    elif sweep and delta < 0:
        delta += 2 * math.pi

    return ArcParameters(cx, cy, rx, ry, phi, theta1, delta)

def segment_count(delta: float) -> int:
    # the epsilon keeps an exact quarter turn from rounding up to two segments
    return max(1, math.ceil(abs(delta) / MAX_SEGMENT_ANGLE - 1e-9))

def arc_to_bezier(start: Point, end: Point, rx: float, ry: float,
                  x_axis_rotation: float, large_arc: bool, sweep: bool) -> list[Point]:
    """Returns a flat list, three points per segment: first control point,
    second control point, segment end. The implicit first point of the
    chain is start and the last point returned is end. x_axis_rotation
    is in degrees.
    """
    if rx == 0 or ry == 0:
        raise ValueError("arc radii must be non-zero")
    if start == end:
        return []

    params = arc_center_parameters(start, end, rx, ry, math.radians(x_axis_rotation),
                                   large_arc, sweep)

    segments = segment_count(params.delta)
    step = params.delta / segments
    points: list[Point] = []

    theta1 = params.theta1
    for i in range(segments):
        theta2 = theta1 + step
        alpha = math.sin(step) * (math.sqrt(4 + 3 * math.tan(step / 2) ** 2) - 1) / 3

        p1 = params.point_at(theta1)
        p2 = params.point_at(theta2)
        d1 = params.derivative_at(theta1)
        d2 = params.derivative_at(theta2)

        c1 = (p1[0] + alpha * d1[0], p1[1] + alpha * d1[1])
        c2 = (p2[0] - alpha * d2[0], p2[1] - alpha * d2[1])
        points.extend([c1, c2, p2])

        theta1 = theta2

    points[-1] = end
    return points
