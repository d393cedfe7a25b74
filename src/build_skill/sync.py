"""
Metadata sync for generated skills repositories.

Discovers the skills on disk and regenerates everything derived from them:
manifest.json, the platform plugin descriptors, the marketplace descriptor,
skills/index.json and the skills table in README.md. Author and repository
from the manifest are also pushed into each SKILL.md.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from . import frontmatter
from .errors import ManifestError
from .skill_indexer import SKILL_FILE, SkillRecord, discover_skills, sort_key

logger = logging.getLogger(__name__)

README_START_MARKER = "<!-- START:Available-Skills -->"
README_END_MARKER = "<!-- END:Available-Skills -->"
DESCRIPTION_MAX_LENGTH = 80


@dataclass(frozen=True)
class PluginTarget:
    """A platform plugin descriptor and the extra fields merged into it."""

    path: Path
    extra_fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RepoLayout:
    """Locations of every file the sync reads or writes."""

    root: Path
    skills_dir: Path
    manifest_path: Path
    readme_path: Path
    plugins: List[PluginTarget]
    marketplace_path: Path
    index_path: Path

    @classmethod
    def from_root(
        cls,
        root: Union[str, Path],
        plugin_extra_fields: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> "RepoLayout":
        """Build the standard layout of a generated repository.

        Args:
            root: Repository root
            plugin_extra_fields: Extra fields per platform (``claude``, ``cursor``)
        """
        root = Path(root)
        extras = plugin_extra_fields or {}
        return cls(
            root=root,
            skills_dir=root / "skills",
            manifest_path=root / "manifest.json",
            readme_path=root / "README.md",
            plugins=[
                PluginTarget(root / ".claude-plugin" / "plugin.json", dict(extras.get("claude") or {})),
                PluginTarget(root / ".cursor-plugin" / "plugin.json", dict(extras.get("cursor") or {})),
            ],
            marketplace_path=root / ".claude-plugin" / "marketplace.json",
            index_path=root / "skills" / "index.json",
        )


@dataclass
class SyncReport:
    """What a sync run changed."""

    skills: List[SkillRecord] = field(default_factory=list)
    skill_files_updated: int = 0
    manifest_updated: bool = False
    plugins_updated: List[Path] = field(default_factory=list)
    marketplace_updated: bool = False
    index_updated: bool = False
    readme_updated: bool = False
    warnings: List[str] = field(default_factory=list)


def write_json(path: Path, data: Any) -> None:
    """Write pretty-printed JSON with a single trailing newline."""
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def load_manifest(manifest_path: Path) -> Dict[str, Any]:
    """Read manifest.json.

    Raises:
        ManifestError: If the file is missing or is not a JSON object
    """
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"Could not read {manifest_path.name}: {e}") from e
    if not isinstance(manifest, dict):
        raise ManifestError(f"{manifest_path.name} must contain a JSON object")
    return manifest


def _drop_missing(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def truncate(text: str, max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    """Shorten ``text`` to ``max_length`` characters, ending with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def render_skills_table(skills: List[SkillRecord]) -> str:
    """Render the markdown placed between the README markers."""
    if not skills:
        return "\n*No skills available yet.*\n"

    lines = ["", "| Skill | Description |", "| ----- | ----------- |"]
    for skill in skills:
        description = truncate(skill.description).replace("|", "\\|")
        lines.append(f"| [{skill.name}](./skills/{skill.dir_name}) | {description} |")
    lines.append("")
    return "\n".join(lines)


def list_skill_files(skill_dir: Path) -> List[str]:
    """List every file under a skill directory, SKILL.md first.

    Args:
        skill_dir: Skill directory

    Returns:
        Paths relative to ``skill_dir`` using ``/`` separators
    """
    files = [p.relative_to(skill_dir).as_posix() for p in skill_dir.rglob("*") if p.is_file()]
    files.sort(key=lambda f: (f != SKILL_FILE, sort_key(f)))
    return files


class SkillSyncer:
    """Keep a skills repository's generated files consistent with its skills."""

    def __init__(self, layout: RepoLayout):
        """Initialize syncer.

        Args:
            layout: File locations of the repository
        """
        self.layout = layout

    def sync(self) -> SyncReport:
        """Run every sync step.

        Each step after discovery is isolated: a failure is logged, recorded in
        the report and does not stop the remaining steps.

        Returns:
            Summary of what was updated

        Raises:
            ManifestError: If manifest.json cannot be read
        """
        report = SyncReport()
        report.skills = discover_skills(self.layout.skills_dir)
        logger.info(f"Found {len(report.skills)} agent skill(s)")

        manifest = load_manifest(self.layout.manifest_path)

        self._run_step(report, "SKILL.md frontmatter", lambda: self._update_skill_files(report, manifest))
        self._run_step(report, "manifest", lambda: self._update_manifest(report, manifest))
        for plugin in self.layout.plugins:
            self._run_step(report, str(plugin.path), lambda p=plugin: self._update_plugin(report, manifest, p))
        self._run_step(report, "marketplace", lambda: self._update_marketplace(report, manifest))
        self._run_step(report, "index", lambda: self._update_index(report))
        self._run_step(report, "README", lambda: self._update_readme(report))

        return report

    def _run_step(self, report: SyncReport, name: str, step: Callable[[], None]) -> None:
        try:
            step()
        except Exception as e:
            message = f"Could not update {name}: {e}"
            logger.warning(message)
            report.warnings.append(message)

    def _warn(self, report: SyncReport, message: str) -> None:
        logger.warning(message)
        report.warnings.append(message)

    def _update_skill_files(self, report: SyncReport, manifest: Dict[str, Any]) -> None:
        author_info = manifest.get("author")
        author = author_info.get("name", "") if isinstance(author_info, dict) else ""
        repository = manifest.get("repository") or ""

        for skill in report.skills:
            skill_file = self.layout.skills_dir / skill.dir_name / SKILL_FILE
            with open(skill_file, "r", encoding="utf-8", newline="") as f:
                original = f.read()

            content = original
            if author:
                content = frontmatter.set_author(content, author)
            if repository:
                content = frontmatter.set_repository(content, repository)

            if content != original:
                with open(skill_file, "w", encoding="utf-8", newline="") as f:
                    f.write(content)
                report.skill_files_updated += 1

        if report.skill_files_updated:
            logger.info(f"Updated {report.skill_files_updated} {SKILL_FILE} file(s)")

    def _update_manifest(self, report: SyncReport, manifest: Dict[str, Any]) -> None:
        manifest["skills"] = [
            {
                "name": skill.name,
                "description": skill.description,
                "version": skill.version,
                "source": f"./skills/{skill.dir_name}",
                "license": skill.license,
                "keywords": list(skill.keywords),
            }
            for skill in report.skills
        ]
        write_json(self.layout.manifest_path, manifest)
        report.manifest_updated = True
        logger.info(f"Updated {self.layout.manifest_path.name}")

    def _update_plugin(self, report: SyncReport, manifest: Dict[str, Any], plugin: PluginTarget) -> None:
        plugin_json = _drop_missing(
            {
                "name": manifest.get("name"),
                "description": manifest.get("description"),
                "version": manifest.get("version"),
                "author": manifest.get("author"),
                "homepage": manifest.get("homepage"),
                "repository": manifest.get("repository"),
                "license": manifest.get("license"),
                "keywords": manifest.get("keywords") or [],
                "skills": "./skills/",
            }
        )
        plugin_json.update(plugin.extra_fields)

        plugin.path.parent.mkdir(parents=True, exist_ok=True)
        write_json(plugin.path, plugin_json)
        report.plugins_updated.append(plugin.path)
        logger.info(f"Updated {plugin.path}")

    def _update_marketplace(self, report: SyncReport, manifest: Dict[str, Any]) -> None:
        path = self.layout.marketplace_path
        try:
            marketplace = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            self._warn(report, f"Could not read {path.name}, skipping: {e}")
            return
        if not isinstance(marketplace, dict):
            self._warn(report, f"{path.name} is not a JSON object, skipping")
            return

        marketplace["plugins"] = [
            _drop_missing(
                {
                    "name": manifest.get("name"),
                    "description": manifest.get("description"),
                    "version": manifest.get("version"),
                    "author": manifest.get("author"),
                    "source": "./",
                    "homepage": manifest.get("homepage"),
                    "repository": manifest.get("repository"),
                    "license": manifest.get("license"),
                    "keywords": manifest.get("keywords") or [],
                }
            )
        ]
        write_json(path, marketplace)
        report.marketplace_updated = True
        logger.info(f"Updated {path}")

    def _update_index(self, report: SyncReport) -> None:
        index_skills = [
            {
                "name": skill.dir_name,
                "description": skill.description,
                "files": list_skill_files(self.layout.skills_dir / skill.dir_name),
            }
            for skill in report.skills
        ]
        self.layout.index_path.parent.mkdir(parents=True, exist_ok=True)
        write_json(self.layout.index_path, {"skills": index_skills})
        report.index_updated = True
        logger.info(f"Updated {self.layout.index_path}")

    def _update_readme(self, report: SyncReport) -> None:
        path = self.layout.readme_path
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()

        start = content.find(README_START_MARKER)
        end = content.find(README_END_MARKER)
        if start == -1 or end == -1 or end < start:
            self._warn(report, f"Could not find skill markers in {path.name}, skipping")
            return

        table = render_skills_table(report.skills)
        if "\r\n" in content:
            table = table.replace("\n", "\r\n")
        new_content = content[: start + len(README_START_MARKER)] + table + content[end:]
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(new_content)
        report.readme_updated = True
        logger.info(f"Updated {path}")


def sync_skills(layout: RepoLayout) -> SyncReport:
    """Sync all generated files of the repository described by ``layout``."""
    return SkillSyncer(layout).sync()
