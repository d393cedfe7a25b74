import json
from pathlib import Path
from typing import Callable

import pytest

from build_skill.values import TemplateValues


def _make_values(**overrides: str) -> TemplateValues:
    fields = {
        "Brand_Name": "test-brand",
        "Skill_Name": "test-skill",
        "Skill_Description": "A test skill",
        "Creator_Name": "Test User",
        "Creator_Email": "test@example.com",
        "Skill_License": "MIT",
        "Skill_Homepage": "https://example.com",
        "Skill_Repository": "test/repo",
        "Skill_Category": "general",
        "Skill_Keywords": "test",
    }
    fields.update(overrides)
    return TemplateValues(**fields)


@pytest.fixture
def make_values() -> Callable[..., TemplateValues]:
    return _make_values


@pytest.fixture
def values() -> TemplateValues:
    return _make_values()


@pytest.fixture
def skills_repo(tmp_path: Path) -> Path:
    """A minimal generated repository with a manifest, README and marketplace file."""
    root = tmp_path / "acme-skills"
    (root / "skills").mkdir(parents=True)
    (root / ".claude-plugin").mkdir()
    manifest = {
        "name": "acme-skills",
        "description": "Agent skills by acme",
        "version": "1.2.0",
        "author": {"name": "Jane Doe", "email": "jane@example.com"},
        "license": "Apache-2.0",
        "homepage": "https://acme.example.com",
        "repository": "https://github.com/acme/agent-skills",
        "keywords": ["ai", "agent"],
        "skills": [],
    }
    (root / "manifest.json").write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    (root / ".claude-plugin" / "marketplace.json").write_text(
        json.dumps({"name": "acme-skills", "owner": {"name": "Jane Doe"}, "plugins": []}, indent=2) + "\n",
        encoding="utf-8",
    )
    (root / "README.md").write_text(
        "# acme\n\n<!-- START:Available-Skills -->\nstale\n<!-- END:Available-Skills -->\n\nfooter\n",
        encoding="utf-8",
    )
    return root


def write_skill(root: Path, dir_name: str, frontmatter: str, body: str = "\n# Body\n") -> Path:
    skill_dir = root / "skills" / dir_name
    skill_dir.mkdir(parents=True, exist_ok=True)
    skill_file = skill_dir / "SKILL.md"
    skill_file.write_text(f"---\n{frontmatter}\n---\n{body}", encoding="utf-8")
    return skill_file


@pytest.fixture
def add_skill_file() -> Callable[..., Path]:
    return write_skill
