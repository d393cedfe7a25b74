"""
SKILL.md frontmatter handling.

The frontmatter dialect is deliberately small: ``key: value`` lines between
two ``---`` lines, with one level of nesting for keys whose value is empty::

    ---
    name: my-skill
    description: "Does things"
    metadata:
      author: Jane
      keywords: "ai, agent"
    ---

Reading goes through :func:`parse_frontmatter`. Writing never reserializes:
:func:`set_author` and :func:`set_repository` patch single lines so the rest of
the file stays byte-for-byte identical.
"""

import json
import re
from typing import Any, Dict, Optional, Union

from .errors import FrontmatterError

FRONTMATTER_PATTERN = re.compile(r"^---\r?\n(.*?)\r?\n---", re.DOTALL)

_AUTHOR_PATTERN = re.compile(r"^(  author:) [^\r\n]+", re.MULTILINE)
_AUTHOR_LINE_PATTERN = re.compile(r"^(  author: [^\r\n]+)(\r?\n)?", re.MULTILINE)
_REPOSITORY_PATTERN = re.compile(r"^(  repository:) [^\r\n]+", re.MULTILINE)

Scalar = Union[str, list, dict, int, float, bool, None]
Frontmatter = Dict[str, Union[Scalar, Dict[str, Scalar]]]


def parse_value(raw: str) -> Scalar:
    """Parse a single frontmatter value.

    Args:
        raw: Text after the colon

    Returns:
        Parsed JSON for ``[...]`` values (the text itself if that fails), the
        unquoted string for quoted values, otherwise the trimmed text
    """
    value = raw.strip()
    if value.startswith("[") and value.endswith("]"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def parse_frontmatter(content: str) -> Frontmatter:
    """Parse the frontmatter block at the top of a SKILL.md file.

    Args:
        content: Full file content

    Returns:
        Top-level keys mapped to scalars, or to a dict for keys that open a
        nested block

    Raises:
        FrontmatterError: If the content has no ``---`` delimited block
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        raise FrontmatterError("Missing frontmatter block (expected '---' delimited header)")

    result: Frontmatter = {}
    current: Optional[Dict[str, Any]] = None

    for line in match.group(1).splitlines():
        if not line.strip() or ":" not in line:
            continue

        key, raw_value = line.split(":", 1)
        key = key.strip()
        value = parse_value(raw_value)

        if _indent_of(line) > 0 and current is not None:
            if value != "":
                current[key] = value
        elif value == "":
            current = {}
            result[key] = current
        else:
            current = None
            result[key] = value

    return result


def set_author(content: str, author: str) -> str:
    """Replace the value of the nested ``author:`` line.

    Args:
        content: SKILL.md content
        author: New author name

    Returns:
        Patched content; unchanged if there is no author line
    """
    return _AUTHOR_PATTERN.sub(lambda m: f'{m.group(1)} "{author}"', content, count=1)


def set_repository(content: str, repository: str) -> str:
    """Update the nested ``repository:`` line, or add it after ``author:``.

    Args:
        content: SKILL.md content
        repository: Repository to record

    Returns:
        Patched content; unchanged if neither line is present
    """
    if _REPOSITORY_PATTERN.search(content):
        return _REPOSITORY_PATTERN.sub(lambda m: f'{m.group(1)} "{repository}"', content, count=1)

    def insert(match: "re.Match[str]") -> str:
        # The new line takes the author line's own ending.
        ending = match.group(2) or ""
        separator = ending or "\n"
        return f'{match.group(1)}{separator}  repository: "{repository}"{ending}'

    return _AUTHOR_LINE_PATTERN.sub(insert, content, count=1)
