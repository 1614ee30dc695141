"""Effective layer dimensions.

Formats disagree on where tile sizes live: some give every layer its own, some
declare one size for the whole map, some store none and rely on a constant
baked into the game. ``resolve_layer_dims`` hides that difference so callers
always get a usable tile size.
"""

from typing import NamedTuple, Union

from .models import GridSize, Layer, Map2D, TileSize


class LayerDims(NamedTuple):
    """Resolved size of a layer.

    Attributes:
        grid: Layer size in tiles (always taken from the layer)
        tile: Effective tile size in pixels
    """

    grid: GridSize
    tile: TileSize

    @property
    def pixel_width(self) -> int:
        return self.grid.width * self.tile.width

    @property
    def pixel_height(self) -> int:
        return self.grid.height * self.tile.height


def resolve_tile_size(map2d: Map2D, layer: Layer) -> TileSize:
    """Return the tile size a layer should be drawn with.

    Lookup order is the layer's own size, then the map default, then the
    constant supplied by the codec that produced the map.
    """
    if layer.tile_size is not None:
        return layer.tile_size
    if map2d.tile_size is not None:
        return map2d.tile_size
    return map2d.fallback_tile_size


def resolve_layer_dims(map2d: Map2D, layer: Union[Layer, int]) -> LayerDims:
    """Resolve grid and tile size for a layer of the given map.

    Args:
        map2d: Map owning the layer
        layer: The layer itself or its index within the map

    Returns:
        LayerDims with the grid size in tiles and tile size in pixels

    Raises:
        IndexError: If an index is given that is not a valid layer index
        ValueError: If a Layer is given that does not belong to the map
    """
    if isinstance(layer, int):
        layer = map2d.get_layer(layer)
    elif not any(candidate is layer for candidate in map2d.layers):
        raise ValueError(f"{layer!r} does not belong to this map")

    return LayerDims(grid=layer.grid_size, tile=resolve_tile_size(map2d, layer))
