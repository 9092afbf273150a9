"""Utility functions for mammaltag.

This module provides utility functions including:

- Logging setup and configuration
- Structured build events
"""

from mammaltag.utils.logging import (
    BuildLogger,
    configure_logging,
)

__all__ = [
    "BuildLogger",
    "configure_logging",
]
