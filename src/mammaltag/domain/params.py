"""Tag build parameters."""

import math
from dataclasses import asdict, dataclass
from typing import Any

from mammaltag.exceptions import InvalidParametersError


@dataclass(frozen=True)
class TagParams:
    """Dimensions and text of a tag build request.

    Hashable so identical in-flight requests can be coalesced.

    Attributes:
        width: Extent along the prism axis in millimeters
        depth: Base width of the triangular profile in millimeters
        height: Apex height of the triangular profile in millimeters
        text: Text to engrave; empty skips engraving
        text_height: Engraving depth scale (not a font point size)
    """

    width: float
    depth: float
    height: float
    text: str = ""
    text_height: float = 1.0

    def __post_init__(self) -> None:
        for name in ("width", "depth", "height", "text_height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidParametersError(name, value)
            if not math.isfinite(value) or value <= 0:
                raise InvalidParametersError(name, value)

    @property
    def has_text(self) -> bool:
        return len(self.text) > 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TagParams":
        """Build params from a caller payload.

        Accepts both ``text_height`` and the camel-case ``textHeight`` used by
        front-end shells.
        """
        text_height = data.get("text_height", data.get("textHeight", 1.0))
        return cls(
            width=data["width"],
            depth=data["depth"],
            height=data["height"],
            text=data.get("text", "") or "",
            text_height=text_height,
        )
