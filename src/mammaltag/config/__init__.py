"""Configuration management for mammaltag.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- OutlineConfig: Curve flattening and contour cleanup
- LayoutConfig: Font size calibration
- EngraveConfig / TextPlaneConfig: Engraving depth and text plane placement
- BodyConfig: Base body fillets
- TessellationConfig: Kernel triangulation tolerances
- FontConfig: Font resolution
- LoggingConfig: Logging settings
- MammaltagSettings: Main application settings
"""

from mammaltag.config.settings import (
    BodyConfig,
    EngraveConfig,
    FontConfig,
    LayoutConfig,
    LoggingConfig,
    MammaltagSettings,
    OutlineConfig,
    TessellationConfig,
    TextPlaneConfig,
    get_default_settings,
)

__all__ = [
    "BodyConfig",
    "EngraveConfig",
    "FontConfig",
    "LayoutConfig",
    "LoggingConfig",
    "MammaltagSettings",
    "OutlineConfig",
    "TessellationConfig",
    "TextPlaneConfig",
    "get_default_settings",
]
