"""gamemaps JSON interchange format.

A lossless, human-readable dump of a Map2D, used to move levels between tools
and as a neutral target when converting between game formats. Unlike the game
codecs it keeps everything the model can hold: attributes, tile sizes at every
level, per-layer and map-level paths, and cell flags.

Example document::

    {
      "format": "gamemaps-json",
      "version": 1,
      "tile_size": [16, 16],
      "viewport": null,
      "attributes": [
        {"type": "int", "name": "Level", "description": "", "value": 1, "min": 1, "max": 10}
      ],
      "layers": [
        {
          "title": "Background",
          "width": 2,
          "height": 1,
          "tile_size": null,
          "default_code": 0,
          "codes": [[1, 2]],
          "paths": []
        }
      ],
      "paths": []
    }

An optional "flags" grid (same shape as "codes") is written only for layers
where some cell has non-zero flags.
"""

from typing import Any, BinaryIO, Optional, cast

import orjson

from ..errors import FormatError, MapValidationError
from ..maps.attributes import (
    Attribute,
    AttributeType,
    EnumAttribute,
    FilenameAttribute,
    IntAttribute,
    TextAttribute,
)
from ..maps.models import (
    Cell,
    CoordinateUnits,
    Layer,
    LayerCaps,
    Map,
    Map2D,
    Map2DCaps,
    Path,
    TileSize,
)
from .base import Certainty, MapOutput, MapType, SuppType

FORMAT_MARKER = "gamemaps-json"
FORMAT_VERSION = 1

JSON_LAYER_CAPS = LayerCaps.CAN_RESIZE | LayerCaps.CHANGE_TILE_SIZE
JSON_MAP_CAPS = Map2DCaps.HAS_PATHS | Map2DCaps.CHANGE_TILE_SIZE


class MapDocumentSchema:
    """Validation of the JSON document structure.

    Every method returns a list of error messages (empty if valid) so that a
    broken file reports all of its problems at once.
    """

    REQUIRED_ROOT_FIELDS = {
        "format",
        "version",
        "tile_size",
        "viewport",
        "attributes",
        "layers",
        "paths",
    }
    REQUIRED_LAYER_FIELDS = {"title", "width", "height", "tile_size", "codes"}
    REQUIRED_PATH_FIELDS = {"points"}
    VALID_ATTRIBUTE_TYPES = {t.value for t in AttributeType}
    VALID_UNITS = {u.value for u in CoordinateUnits}

    @staticmethod
    def _is_int(value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    @staticmethod
    def _validate_size(value: Any, label: str, allow_null: bool = True) -> list[str]:
        if value is None and allow_null:
            return []
        if (
            not isinstance(value, list)
            or len(cast(list[Any], value)) != 2
            or not all(MapDocumentSchema._is_int(v) and v > 0 for v in cast(list[Any], value))
        ):
            return [f"{label} must be null or a pair of positive integers, got {value!r}"]
        return []

    @staticmethod
    def validate_root(data: Any) -> list[str]:
        """Validate root-level fields."""
        if not isinstance(data, dict):
            return ["Document root must be an object"]
        data = cast(dict[str, Any], data)
        errors: list[str] = []

        missing = MapDocumentSchema.REQUIRED_ROOT_FIELDS - data.keys()
        if missing:
            errors.append(f"Missing required fields: {sorted(missing)}")
            return errors

        if data["format"] != FORMAT_MARKER:
            errors.append(f"'format' must be {FORMAT_MARKER!r}, got {data['format']!r}")
        if data["version"] != FORMAT_VERSION:
            errors.append(f"Unsupported version {data['version']!r}, expected {FORMAT_VERSION}")
        errors += MapDocumentSchema._validate_size(data["tile_size"], "'tile_size'")
        errors += MapDocumentSchema._validate_size(data["viewport"], "'viewport'")
        for name in ("attributes", "layers", "paths"):
            if not isinstance(data[name], list):
                errors.append(f"'{name}' must be an array")

        return errors

    @staticmethod
    def validate_attribute(attr: Any, index: int) -> list[str]:
        """Validate one attribute entry."""
        label = f"Attribute {index}"
        if not isinstance(attr, dict):
            return [f"{label} must be an object"]
        attr = cast(dict[str, Any], attr)
        errors: list[str] = []

        attr_type = attr.get("type")
        if attr_type not in MapDocumentSchema.VALID_ATTRIBUTE_TYPES:
            return [f"{label} has unknown type {attr_type!r}"]
        if not isinstance(attr.get("name"), str):
            errors.append(f"{label} 'name' must be a string")
        if not isinstance(attr.get("description", ""), str):
            errors.append(f"{label} 'description' must be a string")

        if attr_type == AttributeType.INTEGER.value:
            for key in ("value", "min", "max"):
                if not MapDocumentSchema._is_int(attr.get(key)):
                    errors.append(f"{label} '{key}' must be an integer")
        elif attr_type == AttributeType.ENUM.value:
            options = attr.get("options")
            if not isinstance(options, list) or not all(
                isinstance(o, str) for o in cast(list[Any], options)
            ):
                errors.append(f"{label} 'options' must be an array of strings")
            if not MapDocumentSchema._is_int(attr.get("value")):
                errors.append(f"{label} 'value' must be an integer")
        else:
            if not isinstance(attr.get("value"), str):
                errors.append(f"{label} 'value' must be a string")
            max_length = attr.get("max_length")
            if max_length is not None and not MapDocumentSchema._is_int(max_length):
                errors.append(f"{label} 'max_length' must be null or an integer")
            if attr_type == AttributeType.FILENAME.value:
                extension = attr.get("extension")
                if extension is not None and not isinstance(extension, str):
                    errors.append(f"{label} 'extension' must be null or a string")

        return errors

    @staticmethod
    def validate_path(path: Any, label: str, layer_count: int) -> list[str]:
        """Validate one path entry."""
        if not isinstance(path, dict):
            return [f"{label} must be an object"]
        path = cast(dict[str, Any], path)
        errors: list[str] = []

        missing = MapDocumentSchema.REQUIRED_PATH_FIELDS - path.keys()
        if missing:
            return [f"{label} missing required fields: {sorted(missing)}"]

        points = path["points"]
        if not isinstance(points, list):
            errors.append(f"{label} 'points' must be an array")
        else:
            for i, point in enumerate(cast(list[Any], points)):
                if (
                    not isinstance(point, list)
                    or len(cast(list[Any], point)) != 2
                    or not all(MapDocumentSchema._is_int(v) for v in cast(list[Any], point))
                ):
                    errors.append(f"{label} point {i} must be a pair of integers")

        units = path.get("units", CoordinateUnits.PIXELS.value)
        if units not in MapDocumentSchema.VALID_UNITS:
            errors.append(f"{label} has unknown units {units!r}")

        layer = path.get("layer")
        if layer is not None and (
            not MapDocumentSchema._is_int(layer) or not (0 <= layer < layer_count)
        ):
            errors.append(f"{label} refers to layer {layer!r}, map has {layer_count}")

        return errors

    @staticmethod
    def validate_layer(layer: Any, index: int, layer_count: int) -> list[str]:
        """Validate one layer entry, including grid dimensions."""
        label = f"Layer {index}"
        if not isinstance(layer, dict):
            return [f"{label} must be an object"]
        layer = cast(dict[str, Any], layer)
        errors: list[str] = []

        missing = MapDocumentSchema.REQUIRED_LAYER_FIELDS - layer.keys()
        if missing:
            return [f"{label} missing required fields: {sorted(missing)}"]

        width, height = layer["width"], layer["height"]
        if not MapDocumentSchema._is_int(width) or width < 0:
            errors.append(f"{label} 'width' must be a non-negative integer")
        if not MapDocumentSchema._is_int(height) or height < 0:
            errors.append(f"{label} 'height' must be a non-negative integer")
        errors += MapDocumentSchema._validate_size(layer["tile_size"], f"{label} 'tile_size'")
        default_code = layer.get("default_code", 0)
        if not MapDocumentSchema._is_int(default_code) or default_code < 0:
            errors.append(f"{label} 'default_code' must be a non-negative integer")
        if errors:
            return errors

        for grid_name in ("codes", "flags"):
            if grid_name == "flags" and "flags" not in layer:
                continue
            errors += MapDocumentSchema._validate_grid(
                layer[grid_name], f"{label} '{grid_name}'", width, height
            )

        paths = layer.get("paths", [])
        if not isinstance(paths, list):
            errors.append(f"{label} 'paths' must be an array")
        else:
            for i, path in enumerate(cast(list[Any], paths)):
                errors += MapDocumentSchema.validate_path(path, f"{label} path {i}", layer_count)

        return errors

    @staticmethod
    def _validate_grid(grid: Any, label: str, width: int, height: int) -> list[str]:
        if not isinstance(grid, list):
            return [f"{label} must be an array"]
        grid_list = cast(list[Any], grid)
        errors: list[str] = []

        if len(grid_list) != height:
            errors.append(f"{label} has {len(grid_list)} rows, expected {height}")

        for row_idx, row in enumerate(grid_list):
            if not isinstance(row, list):
                errors.append(f"{label} row {row_idx} is not an array")
                continue
            row_list = cast(list[Any], row)
            if len(row_list) != width:
                errors.append(f"{label} row {row_idx} width is {len(row_list)}, expected {width}")
            if not all(MapDocumentSchema._is_int(v) and v >= 0 for v in row_list):
                errors.append(f"{label} row {row_idx} must hold non-negative integers")

        return errors

    @staticmethod
    def validate_document(data: Any) -> list[str]:
        """Validate a complete map document."""
        errors = MapDocumentSchema.validate_root(data)
        if errors:
            return errors  # Don't continue if root is invalid

        layers = cast(list[Any], data["layers"])
        for i, attr in enumerate(cast(list[Any], data["attributes"])):
            errors += MapDocumentSchema.validate_attribute(attr, i)
        for i, layer in enumerate(layers):
            errors += MapDocumentSchema.validate_layer(layer, i, len(layers))
        for i, path in enumerate(cast(list[Any], data["paths"])):
            errors += MapDocumentSchema.validate_path(path, f"Map path {i}", len(layers))

        return errors


class JsonMapType(MapType):
    """gamemaps JSON interchange document (.json)."""

    code = "map-json"
    name = "gamemaps JSON map"
    extensions = ("json",)
    games = ()

    def _check(self, stream: BinaryIO) -> Certainty:
        stream.seek(0)
        raw = stream.read()
        if raw.lstrip()[:1] != b"{":
            return Certainty.DEFINITELY_NO
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            return Certainty.DEFINITELY_NO
        if isinstance(data, dict) and data.get("format") == FORMAT_MARKER:
            return Certainty.DEFINITELY_YES
        return Certainty.DEFINITELY_NO

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def _read(self, stream: BinaryIO, supplements: dict[SuppType, BinaryIO]) -> Map:
        stream.seek(0)
        try:
            data = orjson.loads(stream.read())
        except orjson.JSONDecodeError as e:
            raise FormatError(f"Failed to parse JSON: {e}") from e

        errors = MapDocumentSchema.validate_document(data)
        if errors:
            error_msg = "\n  - ".join(errors)
            raise FormatError(f"Invalid {self.name}:\n  - {error_msg}")

        try:
            attributes = tuple(self._build_attribute(a) for a in data["attributes"])
            layers = [self._build_layer(layer) for layer in data["layers"]]
        except ValueError as e:
            # Attribute bounds and values are only checked by the model itself
            raise FormatError(f"Invalid {self.name}: {e}") from e

        viewport = self._pair(data["viewport"])
        caps = JSON_MAP_CAPS | (Map2DCaps.HAS_VIEWPORT if viewport else Map2DCaps.NONE)
        map2d = self._new_map2d(
            layers=layers,
            attributes=attributes,
            tile_size=self._tile_size(data["tile_size"]),
            viewport=viewport,
            paths=[self._build_path(p) for p in data["paths"]],
            caps=caps,
        )
        self.logger.info(
            f"Loaded JSON map with {map2d.layer_count} layer(s) and "
            f"{len(attributes)} attribute(s)"
        )
        return map2d

    @staticmethod
    def _pair(value: Optional[list[int]]) -> Optional[tuple[int, int]]:
        return (value[0], value[1]) if value is not None else None

    @staticmethod
    def _tile_size(value: Optional[list[int]]) -> Optional[TileSize]:
        return TileSize(value[0], value[1]) if value is not None else None

    def _build_attribute(self, data: dict[str, Any]) -> Attribute:
        attr_type = AttributeType(data["type"])
        name = data["name"]
        description = data.get("description", "")

        if attr_type == AttributeType.INTEGER:
            return IntAttribute(name, data["value"], data["min"], data["max"], description)
        if attr_type == AttributeType.ENUM:
            return EnumAttribute(name, data["options"], data["value"], description)
        if attr_type == AttributeType.FILENAME:
            return FilenameAttribute(
                name,
                data["value"],
                valid_extension=data.get("extension"),
                max_length=data.get("max_length"),
                description=description,
            )
        return TextAttribute(name, data["value"], data.get("max_length"), description)

    def _build_layer(self, data: dict[str, Any]) -> Layer:
        width, height = data["width"], data["height"]
        codes = [code for row in data["codes"] for code in row]
        if "flags" in data:
            flags = [flag for row in data["flags"] for flag in row]
        else:
            flags = [0] * len(codes)

        return Layer(
            data["title"],
            width,
            height,
            [Cell(code, flag) for code, flag in zip(codes, flags)],
            tile_size=self._tile_size(data["tile_size"]),
            paths=[self._build_path(p) for p in data.get("paths", [])],
            caps=JSON_LAYER_CAPS,
            default_code=data.get("default_code", 0),
        )

    @staticmethod
    def _build_path(data: dict[str, Any]) -> Path:
        return Path(
            points=[(x, y) for x, y in data["points"]],
            units=CoordinateUnits(data.get("units", CoordinateUnits.PIXELS.value)),
            relative=bool(data.get("relative", False)),
            layer_index=data.get("layer"),
        )

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def _encode(self, map2d: Map2D) -> MapOutput:
        layer_count = map2d.layer_count
        document = {
            "format": FORMAT_MARKER,
            "version": FORMAT_VERSION,
            "tile_size": self._size_list(map2d.tile_size),
            "viewport": list(map2d.viewport) if map2d.viewport else None,
            "attributes": [self._attribute_to_dict(a) for a in map2d.attributes],
            "layers": [self._layer_to_dict(layer, layer_count) for layer in map2d.layers],
            "paths": [self._path_to_dict(p, layer_count) for p in map2d.paths],
        }
        try:
            data = orjson.dumps(document, option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE)
        except orjson.JSONEncodeError as e:
            # orjson only handles integers that fit in 64 bits
            raise MapValidationError(f"Map cannot be stored as {self.name}: {e}") from e
        return MapOutput(data)

    @staticmethod
    def _size_list(size: Optional[TileSize]) -> Optional[list[int]]:
        return [size.width, size.height] if size is not None else None

    @staticmethod
    def _attribute_to_dict(attr: Attribute) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": attr.type.value,
            "name": attr.name,
            "description": attr.description,
            "value": attr.get(),
        }
        if isinstance(attr, IntAttribute):
            result["min"] = attr.minimum
            result["max"] = attr.maximum
        elif isinstance(attr, EnumAttribute):
            result["options"] = list(attr.options)
        elif isinstance(attr, FilenameAttribute):
            result["extension"] = attr.valid_extension
            result["max_length"] = attr.max_length
        elif isinstance(attr, TextAttribute):
            result["max_length"] = attr.max_length
        return result

    def _layer_to_dict(self, layer: Layer, layer_count: int) -> dict[str, Any]:
        rows = list(layer.rows())
        result: dict[str, Any] = {
            "title": layer.title,
            "width": layer.width,
            "height": layer.height,
            "tile_size": self._size_list(layer.tile_size),
            "default_code": layer.default_code,
            "codes": [[cell.code for cell in row] for row in rows],
        }
        if any(cell.flags for cell in layer.cells):
            result["flags"] = [[cell.flags for cell in row] for row in rows]
        result["paths"] = [self._path_to_dict(p, layer_count) for p in layer.paths]
        return result

    @staticmethod
    def _path_to_dict(path: Path, layer_count: int) -> dict[str, Any]:
        if path.layer_index is not None and not (0 <= path.layer_index < layer_count):
            raise MapValidationError(
                f"Path refers to layer {path.layer_index}, map has {layer_count}"
            )
        return {
            "units": path.units.value,
            "relative": path.relative,
            "layer": path.layer_index,
            "points": [[x, y] for x, y in path.points],
        }
