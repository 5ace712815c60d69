"""
Attribute lookup helpers.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..syntax.nodes import Attribute


def find_attr(name: str, attrs: Sequence[Attribute]) -> Optional[Attribute]:
    """Return the first attribute called ``name``, or None."""
    for attribute in attrs:
        if attribute.name == name:
            return attribute
    return None


def has_attr(name: str, attrs: Sequence[Attribute]) -> bool:
    return find_attr(name, attrs) is not None


def attr(deriver: str, name: str, attrs: Sequence[Attribute]) -> Optional[Attribute]:
    """
    Find a deriver-specific attribute.

    ``attr("show", "printer", attrs)`` looks for ``[@deriving.show.printer]``,
    then ``[@show.printer]``, then ``[@printer]``, so that attributes of
    several derivers can coexist on one field.
    """
    for candidate in (f"deriving.{deriver}.{name}", f"{deriver}.{name}", name):
        found = find_attr(candidate, attrs)
        if found is not None:
            return found
    return None
