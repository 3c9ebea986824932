from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass
class RenderOptions:
    width: Optional[int] = None
    height: Optional[int] = None
    background: tuple[int, int, int] = (255, 255, 255)
    anti_aliasing: bool = False
    default_size: float = 400.0
    # max deviation of flattened curves, in output pixels
    curve_tolerance: float = 0.25
