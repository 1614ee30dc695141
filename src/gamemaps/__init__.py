"""
gamemaps: read and write levels of classic tile-based games

Opens level files of several old games into one format-neutral model
(layers of tile codes, paths and typed attributes), and writes that model
back out in any format able to hold it.
"""

__version__ = "0.1.0"
__author__ = "gamemaps Contributors"

# Core entry points
from .formats import ALL_FORMATS, build_registry, Certainty, FormatRegistry, MapType, SuppType
from .settings import GameMapsSettings
from .utils.logging_config import setup_logging

# Main data models
from .maps import (
    Cell, Layer, Map, Map2D, Path, TileSize,
    resolve_layer_dims,
)
from .errors import GameMapsError

__all__ = [
    # Registry and codecs
    'ALL_FORMATS',
    'build_registry',
    'Certainty',
    'FormatRegistry',
    'MapType',
    'SuppType',

    # Configuration and logging
    'GameMapsSettings',
    'setup_logging',

    # Data models
    'Cell',
    'Layer',
    'Map',
    'Map2D',
    'Path',
    'TileSize',
    'resolve_layer_dims',

    # Errors
    'GameMapsError',
]
