"""Path command stream produced by a font outline source.

A text outline is an ordered list of drawing commands in font design
units, plus the metrics needed to lay the string out on a tag.
"""

from dataclasses import dataclass, field
from enum import Enum

from mammaltag.domain.contour import Point


class CommandKind(str, Enum):
    """Kind of a path drawing command."""

    MOVE = "move"
    LINE = "line"
    QUAD = "quad"
    CUBIC = "cubic"
    CLOSE = "close"


@dataclass(frozen=True, slots=True)
class PathCommand:
    """A single drawing command.

    Attributes:
        kind: Command kind
        points: Control points followed by the end point. MOVE and LINE carry
            one point, QUAD carries one or more off-curve points plus the end
            point, CUBIC carries two control points plus the end point, CLOSE
            carries none.
    """

    kind: CommandKind
    points: tuple[Point, ...] = ()

    @property
    def end(self) -> Point | None:
        """The command's end point (None for CLOSE)."""
        return self.points[-1] if self.points else None

    @classmethod
    def move(cls, x: float, y: float) -> "PathCommand":
        return cls(CommandKind.MOVE, (Point(x, y),))

    @classmethod
    def line(cls, x: float, y: float) -> "PathCommand":
        return cls(CommandKind.LINE, (Point(x, y),))

    @classmethod
    def close(cls) -> "PathCommand":
        return cls(CommandKind.CLOSE)


@dataclass
class TextOutline:
    """Outline of a whole string.

    Attributes:
        commands: Drawing commands in font design units, glyphs already
            offset by their pen position
        advance_width: Total advance width of the string in design units
        ascender: Font ascender in design units
        descender: Font descender in design units (usually negative)
        units_per_em: Font units per em
    """

    commands: list[PathCommand] = field(default_factory=list)
    advance_width: float = 0.0
    ascender: float = 0.0
    descender: float = 0.0
    units_per_em: int = 1000

    def is_empty(self) -> bool:
        """True when the string produced no drawing commands (e.g. spaces)."""
        return len(self.commands) == 0
