"""Placeholder values substituted into the bundled template."""

import json
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from .config import BuildDefaults
    from .prompts import SkillInput

SKILL_NAME_PLACEHOLDER = "{Skill_Name}"


@dataclass(frozen=True)
class TemplateValues:
    """Values for every ``{Placeholder}`` token the template understands.

    Field names double as placeholder keys, so ``Skill_Name`` fills
    ``{Skill_Name}``.
    """

    Brand_Name: str
    Skill_Name: str
    Skill_Description: str
    Creator_Name: str
    Creator_Email: str
    Skill_License: str
    Skill_Homepage: str
    Skill_Repository: str
    Skill_Category: str
    Skill_Keywords: str

    def as_dict(self) -> Dict[str, str]:
        """Return the placeholder key to value mapping."""
        return asdict(self)


def split_keywords(raw: str) -> List[str]:
    """Split a comma-separated keyword string, dropping empty pieces."""
    return [k.strip() for k in raw.split(",") if k.strip()]


def serialize_keywords(raw: str) -> str:
    """Serialize comma-separated keywords as a compact JSON array.

    Args:
        raw: Keywords such as ``"ai, agent, skill"``

    Returns:
        JSON text such as ``["ai","agent","skill"]``
    """
    return json.dumps(split_keywords(raw), separators=(",", ":"), ensure_ascii=False)


def make_template_values(
    user_input: "SkillInput",
    defaults: "BuildDefaults",
    license: Optional[str] = None,
    homepage: Optional[str] = None,
    repository: Optional[str] = None,
    keywords: Optional[str] = None,
    category: Optional[str] = None,
    creator_name: Optional[str] = None,
    creator_email: Optional[str] = None,
) -> TemplateValues:
    """Combine user input, command line options and defaults.

    Options that were not given (or are empty) fall back to ``defaults``; the
    repository falls back to ``<brand>/agent-skills``.
    """
    return TemplateValues(
        Brand_Name=user_input.brand_name,
        Skill_Name=user_input.skill_name,
        Skill_Description=user_input.skill_description,
        Creator_Name=creator_name or defaults.creator_name,
        Creator_Email=creator_email or defaults.creator_email,
        Skill_License=license or defaults.license,
        Skill_Homepage=homepage or defaults.homepage,
        Skill_Repository=repository or f"{user_input.brand_name}/agent-skills",
        Skill_Category=category or defaults.category,
        Skill_Keywords=serialize_keywords(keywords or defaults.keywords),
    )
