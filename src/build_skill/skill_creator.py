"""Adding a new skill to an existing skills repository."""

import logging
from pathlib import Path

from .errors import SkillExistsError, ValidationError
from .names import normalize_name
from .skill_indexer import SKILL_FILE
from .sync import RepoLayout, load_manifest

logger = logging.getLogger(__name__)

DEFAULT_SKILL_KEYWORDS = "ai, agent, skill"


def render_skill_file(skill_name: str, description: str, manifest: dict) -> str:
    """Build the SKILL.md content for a new skill.

    Args:
        skill_name: Normalized skill name
        description: What the skill does
        manifest: Parsed manifest.json supplying author and license

    Returns:
        SKILL.md text with frontmatter and an empty body
    """
    author_info = manifest.get("author")
    author = (author_info.get("name") if isinstance(author_info, dict) else None) or "Your Name"
    license = manifest.get("license") or "MIT"

    return f"""---
name: {skill_name}
description: {description}
license: {license}
metadata:
  author: {author}
  version: "1.0.0"
  keywords: "{DEFAULT_SKILL_KEYWORDS}"
---

"""


def add_skill(layout: RepoLayout, raw_name: str, description: str) -> Path:
    """Create ``skills/<name>/SKILL.md`` in the repository.

    Run a sync afterwards to register the skill in the generated files.

    Args:
        layout: File locations of the repository
        raw_name: Skill name as typed; it is normalized
        description: What the skill does

    Returns:
        Path to the new SKILL.md

    Raises:
        ValidationError: If the name or description is unusable
        SkillExistsError: If the skill already has a SKILL.md
        ManifestError: If manifest.json cannot be read
    """
    skill_name = normalize_name(raw_name)
    if not skill_name:
        raise ValidationError("Skill name must contain at least one letter or number")
    if not description:
        raise ValidationError("Description is required")

    skill_file = layout.skills_dir / skill_name / SKILL_FILE
    if skill_file.exists():
        raise SkillExistsError(f'Skill "{skill_name}" already exists')

    manifest = load_manifest(layout.manifest_path)

    skill_file.parent.mkdir(parents=True, exist_ok=True)
    skill_file.write_text(render_skill_file(skill_name, description, manifest), encoding="utf-8")
    logger.info(f"Created {skill_file}")
    return skill_file
