"""Unit tests for typed map attributes."""

import pytest


class TestIntAttribute:
    """Test bounded integer attributes."""

    def test_set_within_bounds(self) -> None:
        """Test values inside [min, max] are accepted."""
        from gamemaps.maps.attributes import IntAttribute

        attr = IntAttribute("Level", 5, 0, 10)
        attr.set(7)
        assert attr.get() == 7
        attr.set(0)
        attr.set(10)
        assert attr.value == 10

    def test_rejected_value_keeps_previous(self) -> None:
        """Test an out-of-range value fails and leaves the old value in place."""
        from gamemaps.errors import AttributeRangeError
        from gamemaps.maps.attributes import IntAttribute

        attr = IntAttribute("Level", 5, 0, 10)
        with pytest.raises(AttributeRangeError):
            attr.set(15)
        assert attr.get() == 5

        with pytest.raises(AttributeRangeError):
            attr.set(-1)
        assert attr.get() == 5

    def test_range_error_is_value_error(self) -> None:
        """Test validation errors can be caught as ValueError too."""
        from gamemaps.errors import GameMapsError
        from gamemaps.maps.attributes import IntAttribute

        attr = IntAttribute("Speed", 1, 1, 3)
        with pytest.raises(ValueError):
            attr.set(4)
        with pytest.raises(GameMapsError):
            attr.value = 4

    def test_wrong_type_rejected(self) -> None:
        """Test non-integers (including bools) are rejected."""
        from gamemaps.errors import AttributeTypeError
        from gamemaps.maps.attributes import IntAttribute

        attr = IntAttribute("Level", 1, 0, 10)
        with pytest.raises(AttributeTypeError):
            attr.set("3")  # type: ignore[arg-type]
        with pytest.raises(AttributeTypeError):
            attr.set(True)
        assert attr.get() == 1

    def test_invalid_bounds(self) -> None:
        """Test construction fails when min > max or the initial value is out of range."""
        from gamemaps.errors import AttributeRangeError
        from gamemaps.maps.attributes import IntAttribute

        with pytest.raises(ValueError):
            IntAttribute("Broken", 0, 10, 0)
        with pytest.raises(AttributeRangeError):
            IntAttribute("Broken", 11, 0, 10)


class TestEnumAttribute:
    """Test option-list attributes."""

    def test_set_valid_index(self) -> None:
        """Test selecting a valid option."""
        from gamemaps.maps.attributes import EnumAttribute

        attr = EnumAttribute("Backdrop", ["Sky", "Cave", "Castle"])
        assert attr.get() == 0
        attr.set(2)
        assert attr.get() == 2
        assert attr.selected == "Castle"

    def test_set_invalid_index(self) -> None:
        """Test indices outside the option list are rejected."""
        from gamemaps.errors import AttributeIndexError
        from gamemaps.maps.attributes import EnumAttribute

        attr = EnumAttribute("Backdrop", ["Sky", "Cave"], 1)
        for bad in (2, -1, 100):
            with pytest.raises(AttributeIndexError):
                attr.set(bad)
        assert attr.get() == 1

    def test_options_are_fixed(self) -> None:
        """Test the option list is copied into a tuple."""
        from gamemaps.maps.attributes import EnumAttribute

        options = ["A", "B"]
        attr = EnumAttribute("Mode", options)
        options.append("C")
        assert attr.options == ("A", "B")

    def test_empty_options(self) -> None:
        """Test an enum needs at least one option."""
        from gamemaps.maps.attributes import EnumAttribute

        with pytest.raises(ValueError):
            EnumAttribute("Mode", [])


class TestStringAttributes:
    """Test filename and text attributes."""

    def test_text_max_length(self) -> None:
        """Test text longer than max_length is rejected."""
        from gamemaps.errors import AttributeLengthError
        from gamemaps.maps.attributes import TextAttribute

        attr = TextAttribute("Title", "Intro", max_length=8)
        attr.set("12345678")
        with pytest.raises(AttributeLengthError):
            attr.set("123456789")
        assert attr.get() == "12345678"

    def test_text_without_limit(self) -> None:
        """Test text of any length is accepted without max_length."""
        from gamemaps.maps.attributes import TextAttribute

        attr = TextAttribute("Title")
        attr.set("x" * 1000)
        assert len(attr.get()) == 1000

    def test_filename_extension_is_advisory(self) -> None:
        """Test the extension filter does not block set()."""
        from gamemaps.maps.attributes import FilenameAttribute

        attr = FilenameAttribute("Music", "song.mid", valid_extension=".MID", max_length=12)
        assert attr.valid_extension == "mid"
        assert attr.matches_extension()

        attr.set("song.cmf")
        assert attr.get() == "song.cmf"
        assert not attr.matches_extension()
        assert attr.matches_extension("OTHER.MID")

    def test_filename_length(self) -> None:
        """Test filenames obey max_length."""
        from gamemaps.errors import AttributeLengthError
        from gamemaps.maps.attributes import FilenameAttribute

        attr = FilenameAttribute("Tileset", "a.til", max_length=8)
        with pytest.raises(AttributeLengthError):
            attr.set("longname.til")
        assert attr.get() == "a.til"

    def test_string_type_checked(self) -> None:
        """Test non-string values are rejected."""
        from gamemaps.errors import AttributeTypeError
        from gamemaps.maps.attributes import TextAttribute

        attr = TextAttribute("Title", "ok")
        with pytest.raises(AttributeTypeError):
            attr.set(42)  # type: ignore[arg-type]
        assert attr.get() == "ok"

    def test_attribute_types(self) -> None:
        """Test each variant reports its attribute type."""
        from gamemaps.maps.attributes import (
            AttributeType,
            EnumAttribute,
            FilenameAttribute,
            IntAttribute,
            TextAttribute,
        )

        assert IntAttribute("a", 0, 0, 1).type is AttributeType.INTEGER
        assert EnumAttribute("b", ["x"]).type is AttributeType.ENUM
        assert FilenameAttribute("c").type is AttributeType.FILENAME
        assert TextAttribute("d").type is AttributeType.TEXT
