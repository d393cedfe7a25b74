"""Command-line entry points: build-skill, add-skill and sync-skills."""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import Config
from .errors import BuildSkillError
from .gitconfig import get_git_config
from .prompts import get_quiet_input, prompt_for_input
from .scaffold import create_skill_repository, template_dir
from .skill_creator import add_skill
from .sync import RepoLayout, SyncReport, sync_skills
from .values import make_template_values

logger = logging.getLogger(__name__)
console = Console()

BANNER = r"""
 _           _ _     _       _    _ _ _
| |__  _   _(_) | __| |  ___| | _(_) | |
| '_ \| | | | | |/ _` | / __| |/ / | | |
| |_) | |_| | | | (_| | \__ \   <| | | |
|_.__/ \__,_|_|_|\__,_| |___/_|\_\_|_|_|
"""


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration.

    Args:
        verbose: Enable debug logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _fail(error: BuildSkillError) -> None:
    console.print(f"[red]{escape(str(error))}[/red]")
    sys.exit(1)


def _print_next_steps(target_dir: Path, brand_name: str, skill_name: str) -> None:
    console.print(f"[green]Created[/green] [cyan]{escape(str(target_dir))}[/cyan]")
    console.print(Panel.fit(
        f"[cyan]cd {brand_name}-skills[/cyan]\n"
        "[cyan]git init[/cyan]\n"
        "[cyan]git remote add origin <YOUR_REPO_URL>[/cyan]\n"
        "[cyan]git branch -M main[/cyan]\n"
        "[cyan]git add .[/cyan]\n"
        f'[cyan]git commit -m "Initial release of {skill_name} skill"[/cyan]\n'
        "[cyan]git push -u origin main[/cyan]\n\n"
        "Edit your skill at:\n"
        f"[cyan]skills/{skill_name}/SKILL.md[/cyan]",
        title="Next steps",
    ))
    console.print("[green]Happy building![/green]")


def _print_sync_report(report: SyncReport) -> None:
    table = Table(title=f"Found {len(report.skills)} agent skill(s)", show_header=True, header_style="bold magenta")
    table.add_column("Skill", style="cyan")
    table.add_column("Directory")
    table.add_column("Version")
    for skill in report.skills:
        table.add_row(skill.name, f"skills/{skill.dir_name}", skill.version)
    console.print(table)

    if report.skill_files_updated:
        console.print(f"Updated {report.skill_files_updated} SKILL.md file(s)")
    if report.manifest_updated:
        console.print("Updated manifest.json")
    for path in report.plugins_updated:
        console.print(f"Updated {escape(str(path))}")
    if report.marketplace_updated:
        console.print("Updated marketplace.json")
    if report.index_updated:
        console.print("Updated skills/index.json")
    if report.readme_updated:
        console.print("Updated README.md")
    if report.warnings:
        console.print(f"[yellow]{len(report.warnings)} step(s) skipped, see warnings above[/yellow]")

    console.print("[green]Skill sync complete![/green]")


def _run_sync(root: Path, config: Config) -> SyncReport:
    layout = RepoLayout.from_root(root, config.plugin_extra_fields)
    return sync_skills(layout)


@click.command(name="build-skill")
@click.argument("name_arg", metavar="[NAME]", required=False)
@click.argument("description_arg", metavar="[DESCRIPTION]", required=False)
@click.option("--brand", "-b", help="Brand/organization name")
@click.option("--name", "-n", help="Skill name")
@click.option("--description", "-d", help="Skill description")
@click.option("--license", "-l", "license_", help="License for the skill")
@click.option("--website", "-w", help="Website URL (e.g. docs) for the skill")
@click.option("--repository", "-r", help="GitHub repository (owner/repo)")
@click.option("--keywords", "-k", help="Comma-separated keywords")
@click.option("--category", "-c", help="Skill category")
@click.option("--output", "-o", help="Output directory")
@click.option("--quiet", "-q", is_flag=True, help="Suppress interactive prompts and visual output")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing directory")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to a YAML config file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="build-skill")
def main(
    name_arg: Optional[str],
    description_arg: Optional[str],
    brand: Optional[str],
    name: Optional[str],
    description: Optional[str],
    license_: Optional[str],
    website: Optional[str],
    repository: Optional[str],
    keywords: Optional[str],
    category: Optional[str],
    output: Optional[str],
    quiet: bool,
    force: bool,
    config_path: Optional[str],
    verbose: bool,
):
    """Scaffold an agent skills repository.

    \b
    Examples:
        build-skill my-skill "Helps with X tasks"
        build-skill -b acme -n my-skill -d "Helps with X tasks" --quiet
    """
    setup_logging(verbose)
    config = Config(config_path)
    defaults = config.build_defaults()

    if not quiet:
        console.print(f"[green]{BANNER}[/green]", highlight=False)

    git_name = get_git_config("user.name")
    git_email = get_git_config("user.email")
    if not ((git_name and git_email) or quiet):
        console.print("[yellow]Could not detect git user.name or user.email. Using placeholders.[/yellow]")

    try:
        if quiet:
            user_input = get_quiet_input(brand, name or name_arg, description or description_arg)
        else:
            user_input = prompt_for_input(brand, name or name_arg, description or description_arg, console)

        values = make_template_values(
            user_input,
            defaults,
            license=license_,
            homepage=website,
            repository=repository,
            keywords=keywords,
            category=category,
            creator_name=git_name,
            creator_email=git_email,
        )

        output_dir = Path(output or defaults.output_dir).expanduser().resolve()
        target_dir = output_dir / f"{user_input.brand_name}-skills"

        if quiet:
            create_skill_repository(template_dir(), target_dir, values, force=force)
        else:
            with console.status(f"Creating the [cyan]{values.Brand_Name}[/cyan] agent skills repository..."):
                create_skill_repository(template_dir(), target_dir, values, force=force)
    except BuildSkillError as e:
        _fail(e)

    if quiet:
        click.echo(str(target_dir))
    else:
        _print_next_steps(target_dir, user_input.brand_name, user_input.skill_name)


@click.command(name="add-skill")
@click.argument("name")
@click.argument("description", nargs=-1, required=True)
@click.option("--root", type=click.Path(file_okay=False), default=".", help="Repository root")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to a YAML config file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def add_skill_command(name: str, description: Tuple[str, ...], root: str, config_path: Optional[str], verbose: bool):
    """Add a new skill to a skills repository, then sync.

    \b
    Examples:
        add-skill my-new-skill "Helps with data processing tasks"
    """
    setup_logging(verbose)
    config = Config(config_path)
    root_path = Path(root)

    try:
        skill_file = add_skill(RepoLayout.from_root(root_path), name, " ".join(description))
        console.print(f"Created [cyan]{escape(str(skill_file.relative_to(root_path)))}[/cyan]")
        report = _run_sync(root_path, config)
    except BuildSkillError as e:
        _fail(e)

    _print_sync_report(report)
    skill_name = skill_file.parent.name
    console.print(Panel.fit(
        f"1. Edit [cyan]skills/{skill_name}/SKILL.md[/cyan] to add your skill content\n"
        "2. Add keywords to the SKILL.md frontmatter for better discoverability",
        title=f'Skill "{skill_name}" created',
    ))


@click.command(name="sync-skills")
@click.option("--root", type=click.Path(file_okay=False), default=".", help="Repository root")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to a YAML config file")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def sync_command(root: str, config_path: Optional[str], verbose: bool):
    """Sync manifest, plugin files, index and README with the skills on disk."""
    setup_logging(verbose)
    config = Config(config_path)

    try:
        report = _run_sync(Path(root), config)
    except BuildSkillError as e:
        _fail(e)

    _print_sync_report(report)


if __name__ == "__main__":
    main()
