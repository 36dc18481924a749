"""
Color identity of a stock line.

A stock line is either uncolored, tied to a cataloged ColorCode, or
described by free text. Callers creating stock may also ask for a color
that is not cataloged yet (NewColor). These are mutually exclusive
variants, resolved once by atelier.ledger.resolve_color() before anything
is persisted.

Usage:
    from atelier.colors import CatalogColor, FreeformColor, NO_COLOR

    ledger.receive(warehouse, yarn, CatalogColor(red), 50, Decimal("4.20"))
    ledger.receive(warehouse, yarn, FreeformColor("sand, undyed"), 10, ...)
    ledger.receive(warehouse, yarn, NO_COLOR, 10, ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class NoColor:
    """No color."""


@dataclass(frozen=True)
class CatalogColor:
    """Existing ColorCode (instance or primary key)."""

    color_code: Any


@dataclass(frozen=True)
class NewColor:
    """
    Color to add to the catalog.

    Reuses the cataloged color when ``code`` already exists.
    An empty ``code`` gets an auto-generated one.
    """

    main_color: str
    code: str = ""
    shade: str = ""


@dataclass(frozen=True)
class FreeformColor:
    """Uncataloged color described by text."""

    description: str


ColorIdentity = Union[NoColor, CatalogColor, NewColor, FreeformColor]

NO_COLOR = NoColor()


def identity_from_fields(color_code, color_description: str) -> ColorIdentity:
    """Rebuild the variant from stored columns."""
    if color_code is not None:
        return CatalogColor(color_code)
    if color_description:
        return FreeformColor(color_description)
    return NO_COLOR
