"""Configuration settings for Mammaltag."""

import math
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

Vector3 = tuple[float, float, float]

DEFAULT_FONT_CANDIDATES: list[str] = [
    # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    # macOS
    "/System/Library/Fonts/Helvetica.ttc",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    # Windows
    "C:\\Windows\\Fonts\\arial.ttf",
]


class OutlineConfig(BaseModel):
    """Configuration for glyph outline flattening and contour cleanup.

    Tolerances are in millimeters; outlines are scaled to millimeters
    before contours are built.
    """

    curve_samples: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Points emitted per Bezier segment (quality/performance knob)",
    )
    point_dedup_tolerance: float = Field(
        default=1e-6,
        ge=0.0,
        le=0.1,
        description="Consecutive points closer than this are merged",
    )
    edge_epsilon: float = Field(
        default=1e-6,
        gt=0.0,
        le=0.1,
        description="Wire edges shorter than this are skipped",
    )


class LayoutConfig(BaseModel):
    """Font size calibration for fitting text on the tag face."""

    width_fill: float = Field(
        default=0.8,
        gt=0.0,
        le=1.0,
        description="Fraction of the tag width the text may span",
    )
    char_aspect: float = Field(
        default=0.6,
        gt=0.0,
        le=2.0,
        description="Assumed average glyph width as a fraction of font size",
    )
    depth_fill: float = Field(
        default=0.4,
        gt=0.0,
        le=1.0,
        description="Maximum font size as a fraction of the tag depth",
    )


class TextPlaneConfig(BaseModel):
    """Placement of the 2D text plane in model space.

    The plane's y-direction is normal x x_direction. The defaults put the
    text on the tag's bottom face (y = 0), readable from below, slightly
    outside the body so the extruded tool fully penetrates the surface.
    """

    origin: Vector3 = Field(default=(0.0, -0.01, 0.0), description="Plane origin")
    normal: Vector3 = Field(default=(0.0, -1.0, 0.0), description="Plane normal (points away from the body)")
    x_direction: Vector3 = Field(default=(1.0, 0.0, 0.0), description="Reading direction")

    @field_validator("normal", "x_direction")
    @classmethod
    def _unit_vector(cls, value: Vector3) -> Vector3:
        length = math.sqrt(sum(c * c for c in value))
        if length < 1e-12:
            raise ValueError("direction must be non-zero")
        return (value[0] / length, value[1] / length, value[2] / length)

    @model_validator(mode="after")
    def _orthogonal(self) -> "TextPlaneConfig":
        dot = sum(a * b for a, b in zip(self.normal, self.x_direction))
        if abs(dot) > 1e-9:
            raise ValueError("x_direction must be perpendicular to normal")
        return self


class EngraveConfig(BaseModel):
    """Configuration for the engraving cut."""

    depth_fraction: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Engraving depth as a fraction of tag height",
    )
    depth_floor: float = Field(
        default=0.02,
        gt=0.0,
        description="Minimum engraving depth in millimeters",
    )
    overshoot: float = Field(
        default=0.01,
        gt=0.0,
        description="Extra extrusion so the tool never ends coplanar with a body face",
    )
    plane: TextPlaneConfig = Field(default_factory=TextPlaneConfig)


class BodyConfig(BaseModel):
    """Configuration for the base tag body."""

    fillet_radius: float = Field(
        default=0.2,
        gt=0.0,
        description="Fillet radius applied to every body edge",
    )


class TessellationConfig(BaseModel):
    """Kernel triangulation tolerances."""

    linear_deflection: float = Field(default=0.1, gt=0.0, description="Linear deflection")
    angular_deflection: float = Field(default=0.1, gt=0.0, description="Angular deflection (radians)")


class FontConfig(BaseModel):
    """Font resolution settings."""

    font_path: Path | None = Field(
        default=None,
        description="Explicit font file (skips system font search)",
    )
    candidates: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FONT_CANDIDATES),
        description="System font locations searched in order",
    )
    font_number: int = Field(
        default=0,
        ge=0,
        description="Face index inside .ttc collections",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class MammaltagSettings(BaseModel):
    """Main application settings."""

    outline: OutlineConfig = Field(default_factory=OutlineConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    engrave: EngraveConfig = Field(default_factory=EngraveConfig)
    body: BodyConfig = Field(default_factory=BodyConfig)
    tessellation: TessellationConfig = Field(default_factory=TessellationConfig)
    font: FontConfig = Field(default_factory=FontConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> MammaltagSettings:
    """Get default application settings."""
    return MammaltagSettings()
