"""
build-skill

Scaffold agent skills repositories from a template and keep their generated
metadata in sync with the skills on disk.
"""

__version__ = "1.0.0"

from .errors import BuildSkillError
from .names import normalize_name
from .scaffold import create_skill_repository, template_dir
from .skill_creator import add_skill
from .skill_indexer import SkillRecord, discover_skills
from .sync import RepoLayout, SyncReport, sync_skills
from .values import TemplateValues

__all__ = [
    "BuildSkillError",
    "RepoLayout",
    "SkillRecord",
    "SyncReport",
    "TemplateValues",
    "add_skill",
    "create_skill_repository",
    "discover_skills",
    "normalize_name",
    "sync_skills",
    "template_dir",
]
