"""
Skill discovery for generated skills repositories.

Scans the skills directory for subdirectories holding a SKILL.md file and
builds a sorted list of skill records from their frontmatter.
"""

import functools
import locale
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from .frontmatter import parse_frontmatter
from .values import split_keywords

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"
DEFAULT_LICENSE = "MIT"
DEFAULT_VERSION = "1.0.0"

_collation_key = functools.cmp_to_key(locale.strcoll)


@dataclass(frozen=True)
class SkillRecord:
    """Metadata for a single skill, as read from its SKILL.md."""

    dir_name: str
    name: str
    description: str = ""
    license: str = DEFAULT_LICENSE
    version: str = DEFAULT_VERSION
    keywords: List[str] = field(default_factory=list)

    @classmethod
    def from_skill_file(cls, dir_name: str, content: str) -> "SkillRecord":
        """Create a SkillRecord from SKILL.md content.

        Raises:
            FrontmatterError: If the content has no frontmatter block
        """
        frontmatter = parse_frontmatter(content)
        metadata = frontmatter.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        keywords_val = metadata.get("keywords")
        keywords = split_keywords(keywords_val) if isinstance(keywords_val, str) else []

        return cls(
            dir_name=dir_name,
            name=str(frontmatter.get("name") or dir_name),
            description=str(frontmatter.get("description") or ""),
            license=str(frontmatter.get("license") or DEFAULT_LICENSE),
            version=str(metadata.get("version") or DEFAULT_VERSION),
            keywords=keywords,
        )


def sort_key(text: str):
    """Locale-aware sort key shared by skill names and file listings."""
    return _collation_key(text)


def discover_skills(skills_dir: Union[str, Path]) -> List[SkillRecord]:
    """Discover every skill under ``skills_dir``.

    A skill that cannot be read or parsed is logged and skipped.

    Args:
        skills_dir: Directory holding one subdirectory per skill

    Returns:
        Skill records sorted by display name
    """
    skills_dir = Path(skills_dir)
    if not skills_dir.is_dir():
        logger.warning(f"No skills directory found at {skills_dir}. Skipping discovery.")
        return []

    skills: List[SkillRecord] = []
    for entry in skills_dir.iterdir():
        if not entry.is_dir():
            continue

        try:
            content = (entry / SKILL_FILE).read_text(encoding="utf-8")
            skills.append(SkillRecord.from_skill_file(entry.name, content))
        except Exception as e:
            logger.warning(f"Could not read skill at {entry.name}: {e}")

    return sorted(skills, key=lambda s: sort_key(s.name))
