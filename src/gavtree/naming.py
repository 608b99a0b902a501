"""Canonical dependency identifiers: a package-type scheme prefix plus the raw coordinate."""

from __future__ import annotations

from collections.abc import Callable

from gavtree.errors import UnsupportedTechnologyError
from gavtree.model import Technology

GAV_PACKAGE_TYPE_IDENTIFIER = "gav://"

Namer = Callable[[str], str]

_PACKAGE_TYPES: dict[Technology, str] = {
    Technology.MAVEN: GAV_PACKAGE_TYPE_IDENTIFIER,
    Technology.GRADLE: GAV_PACKAGE_TYPE_IDENTIFIER,
    Technology.NPM: "npm://",
    Technology.YARN: "npm://",
    Technology.PIP: "pypi://",
    Technology.GO: "go://",
    Technology.NUGET: "nuget://",
}


def package_type_identifier(tech: Technology) -> str:
    try:
        return _PACKAGE_TYPES[tech]
    except KeyError:
        raise UnsupportedTechnologyError(
            f"No package type identifier registered for {tech!r}"
        ) from None


def register_package_type(tech: Technology, prefix: str) -> None:
    """Register (or override) the identifier prefix used for *tech*."""
    _PACKAGE_TYPES[tech] = prefix


def format_id(raw_id: str, tech: Technology = Technology.MAVEN) -> str:
    return package_type_identifier(tech) + raw_id


def namer_for(tech: Technology = Technology.MAVEN) -> Namer:
    """Return a function formatting raw coordinates for *tech*.

    The prefix is resolved once, so later registrations do not affect an
    already-created namer.
    """
    prefix = package_type_identifier(tech)

    def _name(raw_id: str) -> str:
        return prefix + raw_id

    return _name


gav_id = namer_for(Technology.MAVEN)
