"""Format-neutral map models."""

from .attributes import (
    Attribute,
    AttributeType,
    EnumAttribute,
    FilenameAttribute,
    IntAttribute,
    TextAttribute,
)
from .dimensions import LayerDims, resolve_layer_dims, resolve_tile_size
from .models import (
    Cell,
    CoordinateUnits,
    GridSize,
    Layer,
    LayerCaps,
    Map,
    Map2D,
    Map2DCaps,
    MapKind,
    Path,
    TileSize,
)

__all__ = [
    "Attribute",
    "AttributeType",
    "EnumAttribute",
    "FilenameAttribute",
    "IntAttribute",
    "TextAttribute",
    "LayerDims",
    "resolve_layer_dims",
    "resolve_tile_size",
    "Cell",
    "CoordinateUnits",
    "GridSize",
    "Layer",
    "LayerCaps",
    "Map",
    "Map2D",
    "Map2DCaps",
    "MapKind",
    "Path",
    "TileSize",
]
