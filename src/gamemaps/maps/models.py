"""
Data models for tile-based game maps.

This module contains the format-neutral, in-memory representation of a game
level: a Map carrying typed attributes, and its 2D-grid kind Map2D made of
Layers of Cells plus optional Paths. Codecs build these objects when opening a
file and read them back when writing; nothing here knows about any particular
file layout.

Ownership is a plain tree: a Map2D owns its Layers and Paths, a Layer owns its
Cells and Paths. References across the tree (a Path following a Layer) are
stored as layer indices.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Iterator, Optional, Sequence

from ..errors import CapabilityError
from .attributes import Attribute


class MapKind(Enum):
    """Closed set of map shapes."""

    GRID_2D = "2d"
    """Tile grid layers (Map2D)."""


class Map2DCaps(IntFlag):
    """Capabilities of a Map2D instance."""

    NONE = 0
    HAS_VIEWPORT = 0x01
    """The map reports the in-game viewport size."""

    HAS_PATHS = 0x02
    """The map supports map-level paths."""

    FIXED_PATHS = 0x04
    """Paths can be edited but not added or removed."""

    CHANGE_TILE_SIZE = 0x08
    """The map-wide default tile size can be changed."""


class LayerCaps(IntFlag):
    """Capabilities of a single layer."""

    NONE = 0
    CAN_RESIZE = 0x01
    """The layer grid can be resized."""

    CHANGE_TILE_SIZE = 0x02
    """The layer's own tile size can be changed."""


class CoordinateUnits(Enum):
    """Units used by path points."""

    TILES = "tiles"
    PIXELS = "pixels"


# =============================================================================
# Value types
# =============================================================================


@dataclass(frozen=True)
class TileSize:
    """Size of one tile in pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid tile size: {self.width}x{self.height}")

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class GridSize:
    """Size of a layer grid in tiles."""

    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions."""
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid grid size: {self.width}x{self.height}")

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class Cell:
    """A single grid position: format-specific tile code plus flags.

    Attributes:
        code: Tile code as stored by the format
        flags: Format-defined flag bits (0 when unused)
    """

    code: int
    flags: int = 0

    def __post_init__(self) -> None:
        """Validate code and flags."""
        if self.code < 0:
            raise ValueError(f"Invalid tile code: {self.code}")
        if self.flags < 0:
            raise ValueError(f"Invalid cell flags: {self.flags}")


@dataclass
class Path:
    """Ordered sequence of points describing a route through the level.

    Attributes:
        points: (x, y) pairs in order of travel
        units: Whether coordinates are in tiles or pixels
        relative: True if each point is a step from the previous position
        layer_index: Index of the layer this path follows, if any
    """

    points: list[tuple[int, int]] = field(default_factory=list)
    units: CoordinateUnits = CoordinateUnits.PIXELS
    relative: bool = False
    layer_index: Optional[int] = None

    def append(self, x: int, y: int) -> None:
        """Add a point to the end of the path."""
        self.points.append((x, y))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self.points)


# =============================================================================
# Layer
# =============================================================================


class Layer:
    """One tile grid within a Map2D.

    The cell grid is stored row-major with the origin at the top-left, and its
    length always equals ``width * height``. Resizing swaps the grid and the
    dimensions in a single step so the two never disagree.

    Attributes:
        title: User-visible layer name
        tile_size: The layer's own tile size, or None to inherit the map's
        paths: Paths attached to this layer
        caps: Capabilities of this layer
        default_code: Code used for blank cells when the grid grows
    """

    def __init__(
        self,
        title: str,
        width: int,
        height: int,
        cells: Optional[Sequence[Cell]] = None,
        tile_size: Optional[TileSize] = None,
        paths: Optional[list[Path]] = None,
        caps: LayerCaps = LayerCaps.NONE,
        default_code: int = 0,
    ):
        if width < 0 or height < 0:
            raise ValueError(f"Invalid layer dimensions: {width}x{height}")
        if cells is None:
            grid = [Cell(default_code)] * (width * height)
        else:
            grid = list(cells)
            if len(grid) != width * height:
                raise ValueError(
                    f"Layer {title!r} has {len(grid)} cells, expected {width}x{height}"
                )
        self.title = title
        self.tile_size = tile_size
        self.paths: list[Path] = paths if paths is not None else []
        self.caps = caps
        self.default_code = default_code
        self._width = width
        self._height = height
        self._cells = grid

    @classmethod
    def from_codes(
        cls,
        title: str,
        width: int,
        height: int,
        codes: Sequence[int],
        **kwargs,
    ) -> "Layer":
        """Build a layer from a row-major sequence of tile codes."""
        return cls(title, width, height, [Cell(code) for code in codes], **kwargs)

    # -------------------------------------------------------------------------
    # Dimensions
    # -------------------------------------------------------------------------

    @property
    def width(self) -> int:
        """Layer width in tiles."""
        return self._width

    @property
    def height(self) -> int:
        """Layer height in tiles."""
        return self._height

    @property
    def grid_size(self) -> GridSize:
        return GridSize(self._width, self._height)

    def resize(self, width: int, height: int, fill: Optional[int] = None) -> None:
        """Change the grid dimensions.

        Cells in the region shared by the old and new grid keep their content;
        new cells get ``fill`` (the layer's default code when omitted).

        Raises:
            CapabilityError: If the layer cannot be resized
            ValueError: If the new dimensions are negative
        """
        if not self.caps & LayerCaps.CAN_RESIZE:
            raise CapabilityError(f"Layer {self.title!r} cannot be resized")
        if width < 0 or height < 0:
            raise ValueError(f"Invalid layer dimensions: {width}x{height}")

        blank = Cell(self.default_code if fill is None else fill)
        grid: list[Cell] = []
        for y in range(height):
            for x in range(width):
                if x < self._width and y < self._height:
                    grid.append(self._cells[y * self._width + x])
                else:
                    grid.append(blank)

        self._cells, self._width, self._height = grid, width, height

    def set_tile_size(self, tile_size: Optional[TileSize]) -> None:
        """Change (or clear) the layer's own tile size.

        Raises:
            CapabilityError: If the layer's tile size is fixed
        """
        if not self.caps & LayerCaps.CHANGE_TILE_SIZE:
            raise CapabilityError(f"Tile size of layer {self.title!r} cannot be changed")
        self.tile_size = tile_size

    # -------------------------------------------------------------------------
    # Cell access
    # -------------------------------------------------------------------------

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Cell ({x}, {y}) is outside layer {self.title!r} "
                f"({self._width}x{self._height})"
            )
        return y * self._width + x

    def get_cell(self, x: int, y: int) -> Cell:
        """Return the cell at (x, y)."""
        return self._cells[self._offset(x, y)]

    def set_cell(self, x: int, y: int, cell: Cell) -> None:
        """Replace the cell at (x, y)."""
        self._cells[self._offset(x, y)] = cell

    def set_code(self, x: int, y: int, code: int) -> None:
        """Change the tile code at (x, y), keeping its flags."""
        offset = self._offset(x, y)
        self._cells[offset] = Cell(code, self._cells[offset].flags)

    def fill(self, code: int) -> None:
        """Set every cell to the given code with no flags."""
        self._cells = [Cell(code)] * (self._width * self._height)

    @property
    def cells(self) -> tuple[Cell, ...]:
        """All cells, row-major."""
        return tuple(self._cells)

    def codes(self) -> list[int]:
        """All tile codes, row-major."""
        return [cell.code for cell in self._cells]

    def rows(self) -> Iterator[list[Cell]]:
        """Iterate over the grid one row at a time."""
        for y in range(self._height):
            start = y * self._width
            yield self._cells[start:start + self._width]

    def __iter__(self) -> Iterator[tuple[int, int, Cell]]:
        """Iterate over (x, y, cell) in row-major order."""
        for offset, cell in enumerate(self._cells):
            yield offset % self._width, offset // self._width, cell

    def __repr__(self) -> str:
        tile = f", tile={self.tile_size}" if self.tile_size else ""
        return f"Layer({self.title!r}, {self._width}x{self._height}{tile})"


# =============================================================================
# Map containers
# =============================================================================


@dataclass
class Map(ABC):
    """Root of one opened game level.

    Attributes:
        attributes: Format-defined metadata, in the order the codec defined it
        format_code: Code of the codec that produced this map, if any
    """

    attributes: tuple[Attribute, ...] = ()
    format_code: Optional[str] = None

    def __post_init__(self) -> None:
        """Freeze the attribute order."""
        self.attributes = tuple(self.attributes)

    @property
    @abstractmethod
    def kind(self) -> MapKind:
        """Shape of this map."""

    def as_map2d(self) -> Optional["Map2D"]:
        """Return this map as a Map2D, or None if it has a different shape."""
        return None

    def get_attribute(self, index: int) -> Attribute:
        """Return the attribute at the given position.

        Raises:
            IndexError: If index is not a valid position
        """
        if not (0 <= index < len(self.attributes)):
            raise IndexError(
                f"Attribute index {index} out of range (map has {len(self.attributes)})"
            )
        return self.attributes[index]


@dataclass
class Map2D(Map):
    """Map made of tile grid layers.

    Attributes:
        layers: Layers in drawing order
        tile_size: Default tile size for layers without their own, or None
        viewport: In-game visible area in pixels, if the format defines one
        paths: Map-level paths
        caps: Capabilities of this map
        fallback_tile_size: Tile size the producing codec assumes when neither
            the layer nor the map declare one
    """

    layers: list[Layer] = field(default_factory=list)
    tile_size: Optional[TileSize] = None
    viewport: Optional[tuple[int, int]] = None
    paths: list[Path] = field(default_factory=list)
    caps: Map2DCaps = Map2DCaps.NONE
    fallback_tile_size: TileSize = TileSize(1, 1)

    @property
    def kind(self) -> MapKind:
        return MapKind.GRID_2D

    def as_map2d(self) -> Optional["Map2D"]:
        return self

    @property
    def layer_count(self) -> int:
        """Number of layers in the map."""
        return len(self.layers)

    def get_layer(self, index: int) -> Layer:
        """Return the layer at the given index.

        Raises:
            IndexError: If index is not a valid layer index
        """
        if not (0 <= index < len(self.layers)):
            raise IndexError(
                f"Layer index {index} out of range (map has {len(self.layers)})"
            )
        return self.layers[index]

    def set_tile_size(self, tile_size: Optional[TileSize]) -> None:
        """Change (or clear) the map-wide default tile size.

        Raises:
            CapabilityError: If the map's tile size is fixed
        """
        if not self.caps & Map2DCaps.CHANGE_TILE_SIZE:
            raise CapabilityError("This map's tile size cannot be changed")
        self.tile_size = tile_size

    def add_path(self, path: Path) -> None:
        """Append a map-level path.

        Raises:
            CapabilityError: If the map has no paths or a fixed set of them
        """
        self._check_paths_editable()
        if path.layer_index is not None:
            self.get_layer(path.layer_index)
        self.paths.append(path)

    def remove_path(self, index: int) -> Path:
        """Remove and return the map-level path at index.

        Raises:
            CapabilityError: If the map has no paths or a fixed set of them
            IndexError: If index is not a valid path index
        """
        self._check_paths_editable()
        if not (0 <= index < len(self.paths)):
            raise IndexError(f"Path index {index} out of range (map has {len(self.paths)})")
        return self.paths.pop(index)

    def _check_paths_editable(self) -> None:
        if not self.caps & Map2DCaps.HAS_PATHS:
            raise CapabilityError("This map does not support paths")
        if self.caps & Map2DCaps.FIXED_PATHS:
            raise CapabilityError("Paths in this map cannot be added or removed")
