"""
Typed metadata values attached to a map.

Attributes carry format-specific settings (music filename, backdrop mode,
level number, ...) in a format-neutral way. Each codec builds its attribute
list in a fixed order when it opens a map; callers address attributes by
position in that list, never by name.

Every mutation goes through ``set()``, which validates the new value first and
only then commits it, so a rejected value always leaves the previous one in
place.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, Optional, Sequence, TypeVar

from ..errors import (
    AttributeIndexError,
    AttributeLengthError,
    AttributeRangeError,
    AttributeTypeError,
)

T = TypeVar("T")


class AttributeType(Enum):
    """Closed set of attribute variants."""

    INTEGER = "int"
    ENUM = "enum"
    FILENAME = "filename"
    TEXT = "text"


class Attribute(ABC, Generic[T]):
    """Abstract typed value with validated mutation.

    Attributes:
        name: Short user-visible name
        description: Longer explanation of what the value controls
    """

    type: AttributeType

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description

    def get(self) -> T:
        """Return the current value."""
        return self._value

    def set(self, value: T) -> None:
        """Validate and store a new value.

        Raises:
            AttributeValidationError: If the value is rejected. The stored
                value is unchanged in that case.
        """
        self._validate(value)
        self._value = value

    @property
    def value(self) -> T:
        return self.get()

    @value.setter
    def value(self, value: T) -> None:
        self.set(value)

    @abstractmethod
    def _validate(self, value: Any) -> None:
        """Raise an AttributeValidationError subclass if value is unacceptable."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, value={self._value!r})"


class IntAttribute(Attribute[int]):
    """Bounded integer."""

    type = AttributeType.INTEGER

    def __init__(
        self,
        name: str,
        value: int,
        minimum: int,
        maximum: int,
        description: str = "",
    ):
        super().__init__(name, description)
        if minimum > maximum:
            raise ValueError(f"Invalid bounds for {name!r}: {minimum} > {maximum}")
        self.minimum = minimum
        self.maximum = maximum
        self._validate(value)
        self._value = value

    def _validate(self, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise AttributeTypeError(
                f"Attribute {self.name!r} expects an integer, got {type(value).__name__}"
            )
        if not (self.minimum <= value <= self.maximum):
            raise AttributeRangeError(
                f"Value {value} for {self.name!r} is outside "
                f"[{self.minimum}, {self.maximum}]"
            )


class EnumAttribute(Attribute[int]):
    """Index into a fixed, ordered list of options."""

    type = AttributeType.ENUM

    def __init__(
        self,
        name: str,
        options: Sequence[str],
        value: int = 0,
        description: str = "",
    ):
        super().__init__(name, description)
        if not options:
            raise ValueError(f"Enum attribute {name!r} needs at least one option")
        self.options: tuple[str, ...] = tuple(options)
        self._validate(value)
        self._value = value

    @property
    def selected(self) -> str:
        """Text of the currently selected option."""
        return self.options[self._value]

    def _validate(self, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise AttributeTypeError(
                f"Attribute {self.name!r} expects an option index, got {type(value).__name__}"
            )
        if not (0 <= value < len(self.options)):
            raise AttributeIndexError(
                f"Index {value} for {self.name!r} is not one of the "
                f"{len(self.options)} available options"
            )


class _StringAttribute(Attribute[str]):
    """Shared validation for string-valued attributes."""

    def __init__(
        self,
        name: str,
        value: str = "",
        max_length: Optional[int] = None,
        description: str = "",
    ):
        super().__init__(name, description)
        if max_length is not None and max_length < 0:
            raise ValueError(f"Invalid max_length for {name!r}: {max_length}")
        self.max_length = max_length
        self._validate(value)
        self._value = value

    def _validate(self, value: Any) -> None:
        if not isinstance(value, str):
            raise AttributeTypeError(
                f"Attribute {self.name!r} expects a string, got {type(value).__name__}"
            )
        if self.max_length is not None and len(value) > self.max_length:
            raise AttributeLengthError(
                f"Value for {self.name!r} is {len(value)} characters long, "
                f"maximum is {self.max_length}"
            )


class FilenameAttribute(_StringAttribute):
    """Name of another game file, e.g. the tileset or music used by a level.

    The valid extension is a filter for file pickers and is not enforced by
    ``set()``; games often accept any name the engine can open.
    """

    type = AttributeType.FILENAME

    def __init__(
        self,
        name: str,
        value: str = "",
        valid_extension: Optional[str] = None,
        max_length: Optional[int] = None,
        description: str = "",
    ):
        self.valid_extension = valid_extension.lstrip(".").lower() if valid_extension else None
        super().__init__(name, value, max_length, description)

    def matches_extension(self, filename: Optional[str] = None) -> bool:
        """Check a filename (the current value by default) against the filter."""
        if self.valid_extension is None:
            return True
        candidate = self._value if filename is None else filename
        return candidate.lower().endswith(f".{self.valid_extension}")


class TextAttribute(_StringAttribute):
    """Free text, e.g. a level title."""

    type = AttributeType.TEXT
