"""Backing field / property name derivation."""

from collections.abc import Callable

from encapsulation_linter.domain.entities import EncapsulatedNames

DEFAULT_FIELD_NAME = "_field"
DEFAULT_PROPERTY_NAME = "Field"


def derive_names(old_name: str) -> EncapsulatedNames:
    """
    Derive the private field and public property names for `old_name`.

    Leading underscores are stripped first, so `_count` and `count` both give
    (`_count`, `Count`). A name made only of underscores falls back to
    (`_field`, `Field`).
    """
    stripped = old_name.lstrip("_")
    if not stripped:
        return EncapsulatedNames(DEFAULT_FIELD_NAME, DEFAULT_PROPERTY_NAME)

    return EncapsulatedNames(
        field_name="_" + _convert_first(stripped, str.lower),
        property_name=_convert_first(stripped, str.upper),
    )


def _convert_first(name: str, convert: Callable[[str], str]) -> str:
    """Case-convert the first character; characters that would expand (`ß` -> `SS`) are kept."""
    first = convert(name[0])
    if len(first) != 1:
        first = name[0]
    return first + name[1:]
