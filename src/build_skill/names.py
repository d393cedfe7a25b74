"""Slug normalization for brand and skill names."""

import re

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHENS = re.compile(r"-+")


def normalize_name(value: str) -> str:
    """Normalize a raw name into a lowercase, hyphenated slug.

    The result is safe to use as a directory name and as part of generated
    identifiers. It may be empty when ``value`` has no letters or digits.

    Args:
        value: Raw name typed by the user

    Returns:
        Normalized slug, e.g. ``"  My Awesome Skill! @2024  "`` -> ``"my-awesome-skill-2024"``
    """
    name = value.lower().strip()
    name = _WHITESPACE.sub("-", name)
    name = _DISALLOWED.sub("", name)
    name = _HYPHENS.sub("-", name)
    return name.strip("-")
