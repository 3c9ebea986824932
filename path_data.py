from __future__ import annotations
import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Optional, Union
from arc import arc_to_bezier
from geometry import Point, reflect, scan_numbers

logger = logging.getLogger(__name__)

command_pattern = re.compile(r'([MLHVCSQTAZmlhvcsqtaz])([^MLHVCSQTAZmlhvcsqtaz]*)')

ARC_GROUP_SIZE = 7
ARC_FLAG_SLOTS = (3, 4)

@dataclass(frozen=True)
class MoveTo:
    x: float
    y: float

    @property
    def end(self) -> Point:
        return (self.x, self.y)

@dataclass(frozen=True)
class LineTo:
    x: float
    y: float

    @property
    def end(self) -> Point:
        return (self.x, self.y)

@dataclass(frozen=True)
class CubicTo:
    cp1: Point
    cp2: Point
    end: Point

@dataclass(frozen=True)
class QuadTo:
    cp: Point
    end: Point

@dataclass(frozen=True)
class ArcTo:
    rx: float
    ry: float
    x_axis_rotation: float
    large_arc: bool
    sweep: bool
    end: Point

@dataclass(frozen=True)
class ClosePath:
    pass

PathCommand = Union[MoveTo, LineTo, CubicTo, QuadTo, ArcTo, ClosePath]

@dataclass(frozen=True)
class PathState:
    current: Point = (0.0, 0.0)
    subpath_start: Point = (0.0, 0.0)
    first_point: Optional[Point] = None
    last_control: Optional[Point] = None
    last_command: Optional[PathCommand] = None
    closed: bool = False
    emitted: int = 0

    def advance(self, commands: list[PathCommand], **changes) -> 'PathState':
        if commands:
            changes.setdefault('last_command', commands[-1])
            changes['emitted'] = self.emitted + len(commands)
            changes.setdefault('closed', False)
        return replace(self, **changes)

Handler = Callable[[PathState, bool, list[float]], tuple[PathState, list[PathCommand]]]

def _offset(state: PathState, relative: bool, x: float, y: float) -> Point:
    if relative:
        return (state.current[0] + x, state.current[1] + y)
    return (x, y)

def handle_move(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    if len(params) < 2:
        return state, []

    point = _offset(state, relative, params[0], params[1])
    first_point = point if state.emitted == 0 else state.first_point
    commands: list[PathCommand] = [MoveTo(*point)]

    # extra pairs after the first are implicit linetos
    current = point
    for i in range(2, len(params) - 1, 2):
        if relative:
            current = (current[0] + params[i], current[1] + params[i + 1])
        else:
            current = (params[i], params[i + 1])
        commands.append(LineTo(*current))

    return state.advance(commands, current=current, subpath_start=point,
                         first_point=first_point, last_control=None), commands

def handle_line(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    current = state.current
    for i in range(0, len(params) - 1, 2):
        if relative:
            current = (current[0] + params[i], current[1] + params[i + 1])
        else:
            current = (params[i], params[i + 1])
        commands.append(LineTo(*current))

    return state.advance(commands, current=current, last_control=None), commands

def handle_horizontal(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    x, y = state.current
    for value in params:
        x = x + value if relative else value
        commands.append(LineTo(x, y))

    return state.advance(commands, current=(x, y), last_control=None), commands

def handle_vertical(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    x, y = state.current
    for value in params:
        y = y + value if relative else value
        commands.append(LineTo(x, y))

    return state.advance(commands, current=(x, y), last_control=None), commands

def handle_cubic(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    for i in range(0, len(params) - 5, 6):
        cp1 = _offset(state, relative, params[i], params[i + 1])
        cp2 = _offset(state, relative, params[i + 2], params[i + 3])
        end = _offset(state, relative, params[i + 4], params[i + 5])
        command = CubicTo(cp1, cp2, end)
        commands.append(command)
        state = state.advance([command], current=end, last_control=cp2)

    return state, commands

def handle_smooth_cubic(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    for i in range(0, len(params) - 3, 4):
        if state.last_control is not None and isinstance(state.last_command, CubicTo):
            cp1 = reflect(state.last_control, state.current)
        else:
            cp1 = state.current
        cp2 = _offset(state, relative, params[i], params[i + 1])
        end = _offset(state, relative, params[i + 2], params[i + 3])
        command = CubicTo(cp1, cp2, end)
        commands.append(command)
        state = state.advance([command], current=end, last_control=cp2)

    return state, commands

def handle_quadratic(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    for i in range(0, len(params) - 3, 4):
        cp = _offset(state, relative, params[i], params[i + 1])
        end = _offset(state, relative, params[i + 2], params[i + 3])
        command = QuadTo(cp, end)
        commands.append(command)
        state = state.advance([command], current=end, last_control=cp)

    return state, commands

def handle_smooth_quadratic(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    for i in range(0, len(params) - 1, 2):
        if state.last_control is not None and isinstance(state.last_command, QuadTo):
            cp = reflect(state.last_control, state.current)
        else:
            cp = state.current
        end = _offset(state, relative, params[i], params[i + 1])
        command = QuadTo(cp, end)
        commands.append(command)
        state = state.advance([command], current=end, last_control=cp)

    return state, commands

def handle_arc(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = []
    for i in range(0, len(params) - 6, ARC_GROUP_SIZE):
        rx = abs(params[i])
        ry = abs(params[i + 1])
        end = _offset(state, relative, params[i + 5], params[i + 6])

        if rx == 0 or ry == 0:
            command = LineTo(*end)
        else:
            command = ArcTo(rx, ry, params[i + 2], bool(params[i + 3]), bool(params[i + 4]), end)
        commands.append(command)
        state = state.advance([command], current=end, last_control=None)

    return state, commands

def handle_close(state: PathState, relative: bool, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    commands: list[PathCommand] = [ClosePath()]
    return state.advance(commands, current=state.subpath_start, last_control=None, closed=True), commands

HANDLERS: dict[str, Handler] = {
    'M': handle_move,
    'L': handle_line,
    'H': handle_horizontal,
    'V': handle_vertical,
    'C': handle_cubic,
    'S': handle_smooth_cubic,
    'Q': handle_quadratic,
    'T': handle_smooth_quadratic,
    'A': handle_arc,
    'Z': handle_close,
}

def tokenize_path(path_str: Optional[str]) -> list[tuple[str, list[float]]]:
    if not path_str:
        return []

    tokens = []
    for letter, param_str in command_pattern.findall(path_str):
        if letter in 'Aa':
            params = list(scan_numbers(param_str, ARC_FLAG_SLOTS, ARC_GROUP_SIZE))
        else:
            params = list(scan_numbers(param_str))
        tokens.append((letter, params))
    return tokens

def step(state: PathState, letter: str, params: list[float]) -> tuple[PathState, list[PathCommand]]:
    upper = letter.upper()
    relative = letter.islower()
    prefix: list[PathCommand] = []

    if state.closed and upper not in ('M', 'Z'):
        # drawing straight after a close starts a new subpath at the old start
        implicit = MoveTo(*state.subpath_start)
        prefix.append(implicit)
        state = state.advance(prefix, current=state.subpath_start)

    state, commands = HANDLERS[upper](state, relative, params)
    return state, prefix + commands

def parse_path_data(path_str: Optional[str]) -> tuple[PathCommand, ...]:
    state = PathState()
    commands: list[PathCommand] = []

    for letter, params in tokenize_path(path_str):
        state, emitted = step(state, letter, params)
        commands.extend(emitted)

    logger.debug("Parsed %d path commands", len(commands))
    return tuple(commands)

@dataclass(frozen=True)
class Subpath:
    start: Point
    segments: tuple[Union[LineTo, CubicTo, QuadTo], ...]
    closed: bool

def split_subpaths(commands: tuple[PathCommand, ...]) -> tuple[Subpath, ...]:
    """Each arc starts from the previous point reached while walking the
    subpath. Commands before the first MoveTo have nowhere to start from
    and are dropped.
    """
    subpaths: list[Subpath] = []
    start: Optional[Point] = None
    previous: Optional[Point] = None
    segments: list[Union[LineTo, CubicTo, QuadTo]] = []
    closed = False

    def finish():
        if start is not None:
            subpaths.append(Subpath(start, tuple(segments), closed))

    for command in commands:
        if isinstance(command, MoveTo):
            finish()
            start = previous = command.end
            segments = []
            closed = False
            continue

        if start is None:
            continue

        if isinstance(command, ClosePath):
            closed = True
            previous = start
        elif isinstance(command, ArcTo):
            points = arc_to_bezier(previous, command.end, command.rx, command.ry,
                                   command.x_axis_rotation, command.large_arc, command.sweep)
            for i in range(0, len(points) - 2, 3):
                segments.append(CubicTo(points[i], points[i + 1], points[i + 2]))
            previous = command.end
        else:
            segments.append(command)
            previous = command.end

    finish()
    return tuple(subpaths)
