"""Mammaltag - Build engraved 3D tags from text and dimensions.

Mammaltag turns a short text string and a set of tag dimensions into a solid
tag with the text engraved into its bottom face. The solid is converted into
an indexed triangle mesh for preview and into STL/GLB bytes for export.

Example:
    $ mammaltag build --width 40 --depth 40 --height 15 --text A

This will create A-tag.stl in the current directory.
"""

__version__ = "0.1.0"
__author__ = "mammaltag contributors"

__all__ = ["__author__", "__version__"]
