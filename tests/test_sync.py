import json
from pathlib import Path

import pytest

from build_skill.errors import ManifestError
from build_skill.skill_indexer import SkillRecord
from build_skill.sync import (
    RepoLayout,
    list_skill_files,
    render_skills_table,
    sync_skills,
    truncate,
)


def _read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_sync_end_to_end(skills_repo: Path, add_skill_file) -> None:
    add_skill_file(
        skills_repo,
        "data-tool",
        'name: data-tool\ndescription: Crunches | data\nlicense: MIT\nmetadata:\n  author: Someone\n'
        '  version: "1.1.0"\n  keywords: "data, etl"',
    )
    (skills_repo / "skills" / "data-tool" / "scripts").mkdir()
    (skills_repo / "skills" / "data-tool" / "scripts" / "run.py").write_text("print()\n", encoding="utf-8")
    (skills_repo / "skills" / "data-tool" / "README.md").write_text("readme\n", encoding="utf-8")

    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert [s.dir_name for s in report.skills] == ["data-tool"]
    assert report.warnings == []

    manifest = _read_json(skills_repo / "manifest.json")
    assert manifest["skills"] == [
        {
            "name": "data-tool",
            "description": "Crunches | data",
            "version": "1.1.0",
            "source": "./skills/data-tool",
            "license": "MIT",
            "keywords": ["data", "etl"],
        }
    ]
    assert manifest["author"] == {"name": "Jane Doe", "email": "jane@example.com"}
    assert (skills_repo / "manifest.json").read_text(encoding="utf-8").endswith("}\n")

    for plugin_path in (skills_repo / ".claude-plugin" / "plugin.json", skills_repo / ".cursor-plugin" / "plugin.json"):
        plugin = _read_json(plugin_path)
        assert plugin == {
            "name": "acme-skills",
            "description": "Agent skills by acme",
            "version": "1.2.0",
            "author": {"name": "Jane Doe", "email": "jane@example.com"},
            "homepage": "https://acme.example.com",
            "repository": "https://github.com/acme/agent-skills",
            "license": "Apache-2.0",
            "keywords": ["ai", "agent"],
            "skills": "./skills/",
        }

    marketplace = _read_json(skills_repo / ".claude-plugin" / "marketplace.json")
    assert marketplace["owner"] == {"name": "Jane Doe"}
    assert marketplace["plugins"][0]["source"] == "./"
    assert marketplace["plugins"][0]["license"] == "Apache-2.0"

    index = _read_json(skills_repo / "skills" / "index.json")
    assert index == {
        "skills": [
            {
                "name": "data-tool",
                "description": "Crunches | data",
                "files": ["SKILL.md", "README.md", "scripts/run.py"],
            }
        ]
    }

    readme = (skills_repo / "README.md").read_text(encoding="utf-8")
    assert "stale" not in readme
    assert "| [data-tool](./skills/data-tool) | Crunches \\| data |" in readme
    assert readme.startswith("# acme\n\n<!-- START:Available-Skills -->\n| Skill | Description |")
    assert readme.endswith("<!-- END:Available-Skills -->\n\nfooter\n")

    skill_md = (skills_repo / "skills" / "data-tool" / "SKILL.md").read_text(encoding="utf-8")
    assert '  author: "Jane Doe"\n  repository: "https://github.com/acme/agent-skills"\n' in skill_md
    assert report.skill_files_updated == 1


def test_sync_is_idempotent(skills_repo: Path, add_skill_file) -> None:
    add_skill_file(skills_repo, "one", "name: one\ndescription: First\nmetadata:\n  author: X")
    layout = RepoLayout.from_root(skills_repo)
    sync_skills(layout)
    snapshot = {p: p.read_bytes() for p in skills_repo.rglob("*") if p.is_file()}

    report = sync_skills(layout)

    assert report.skill_files_updated == 0
    assert {p: p.read_bytes() for p in skills_repo.rglob("*") if p.is_file()} == snapshot


def test_sync_with_no_skills(skills_repo: Path) -> None:
    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert report.skills == []
    assert _read_json(skills_repo / "skills" / "index.json") == {"skills": []}
    assert _read_json(skills_repo / "manifest.json")["skills"] == []
    assert "*No skills available yet.*" in (skills_repo / "README.md").read_text(encoding="utf-8")


def test_sync_license_reaches_every_plugin(skills_repo: Path) -> None:
    sync_skills(RepoLayout.from_root(skills_repo))

    for plugin_path in (skills_repo / ".claude-plugin" / "plugin.json", skills_repo / ".cursor-plugin" / "plugin.json"):
        assert "Apache-2.0" in plugin_path.read_text(encoding="utf-8")


def test_plugin_is_regenerated_not_merged(skills_repo: Path) -> None:
    (skills_repo / ".cursor-plugin").mkdir()
    (skills_repo / ".cursor-plugin" / "plugin.json").write_text('{"stale": true}', encoding="utf-8")
    layout = RepoLayout.from_root(skills_repo, {"cursor": {"logo": "assets/logo.svg"}})

    sync_skills(layout)

    plugin = _read_json(skills_repo / ".cursor-plugin" / "plugin.json")
    assert "stale" not in plugin
    assert plugin["logo"] == "assets/logo.svg"
    assert "logo" not in _read_json(skills_repo / ".claude-plugin" / "plugin.json")


def test_missing_manifest_fields_are_omitted(skills_repo: Path) -> None:
    (skills_repo / "manifest.json").write_text('{"name": "bare"}', encoding="utf-8")

    sync_skills(RepoLayout.from_root(skills_repo))

    plugin = _read_json(skills_repo / ".claude-plugin" / "plugin.json")
    assert plugin == {"name": "bare", "keywords": [], "skills": "./skills/"}


def test_missing_marketplace_is_skipped(skills_repo: Path, caplog) -> None:
    (skills_repo / ".claude-plugin" / "marketplace.json").unlink()

    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert not report.marketplace_updated
    assert not (skills_repo / ".claude-plugin" / "marketplace.json").exists()
    assert report.index_updated and report.readme_updated
    assert "marketplace.json" in caplog.text


def test_unparsable_marketplace_is_left_alone(skills_repo: Path) -> None:
    path = skills_repo / ".claude-plugin" / "marketplace.json"
    path.write_text("{not json", encoding="utf-8")

    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert not report.marketplace_updated
    assert path.read_text(encoding="utf-8") == "{not json"


def test_readme_without_markers_is_skipped(skills_repo: Path) -> None:
    (skills_repo / "README.md").write_text("# No markers\n", encoding="utf-8")

    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert not report.readme_updated
    assert (skills_repo / "README.md").read_text(encoding="utf-8") == "# No markers\n"
    assert any("markers" in w for w in report.warnings)


def test_sync_keeps_crlf_line_endings(skills_repo: Path) -> None:
    skill_dir = skills_repo / "skills" / "crlf"
    skill_dir.mkdir()
    (skill_dir / "SKILL.md").write_bytes(
        b"---\r\nname: crlf\r\ndescription: Windows file\r\nmetadata:\r\n  author: Old\r\n---\r\nbody\r\n"
    )
    (skills_repo / "README.md").write_bytes(
        b"# acme\r\n\r\n<!-- START:Available-Skills -->\r\nstale\r\n<!-- END:Available-Skills -->\r\n\r\nfooter\r\n"
    )

    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert report.skill_files_updated == 1
    assert (skill_dir / "SKILL.md").read_bytes() == (
        b"---\r\nname: crlf\r\ndescription: Windows file\r\nmetadata:\r\n"
        b'  author: "Jane Doe"\r\n'
        b'  repository: "https://github.com/acme/agent-skills"\r\n'
        b"---\r\nbody\r\n"
    )
    readme = (skills_repo / "README.md").read_bytes()
    assert readme.startswith(b"# acme\r\n\r\n<!-- START:Available-Skills -->\r\n| Skill | Description |\r\n")
    assert readme.endswith(b"<!-- END:Available-Skills -->\r\n\r\nfooter\r\n")
    assert b"stale" not in readme
    assert b"\n" not in readme.replace(b"\r\n", b"")


def test_missing_readme_does_not_stop_other_steps(skills_repo: Path) -> None:
    (skills_repo / "README.md").unlink()

    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert report.manifest_updated and report.index_updated
    assert not report.readme_updated
    assert any("README" in w for w in report.warnings)


def test_missing_manifest_is_fatal(skills_repo: Path) -> None:
    (skills_repo / "manifest.json").unlink()

    with pytest.raises(ManifestError):
        sync_skills(RepoLayout.from_root(skills_repo))


def test_no_author_in_manifest_leaves_skill_files(skills_repo: Path, add_skill_file) -> None:
    (skills_repo / "manifest.json").write_text('{"name": "bare"}', encoding="utf-8")
    skill_file = add_skill_file(skills_repo, "one", "name: one\nmetadata:\n  author: Keep Me")
    before = skill_file.read_bytes()

    report = sync_skills(RepoLayout.from_root(skills_repo))

    assert report.skill_files_updated == 0
    assert skill_file.read_bytes() == before


def test_truncate_and_table() -> None:
    assert truncate("short") == "short"
    long_text = "x" * 100
    assert truncate(long_text) == "x" * 77 + "..."
    assert len(truncate(long_text)) == 80

    table = render_skills_table([SkillRecord(dir_name="d", name="n", description="a|b")])
    assert table == "\n| Skill | Description |\n| ----- | ----------- |\n| [n](./skills/d) | a\\|b |\n"
    assert render_skills_table([]) == "\n*No skills available yet.*\n"


def test_list_skill_files_puts_skill_file_first(tmp_path: Path) -> None:
    for rel in ["b.md", "SKILL.md", "a/z.txt", "A.md"]:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x", encoding="utf-8")

    assert list_skill_files(tmp_path) == ["SKILL.md", "A.md", "a/z.txt", "b.md"]
