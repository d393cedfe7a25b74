"""Collecting and validating the brand, skill name and description."""

from dataclasses import dataclass
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from .errors import ValidationError
from .names import normalize_name

MAX_DESCRIPTION_LENGTH = 1024


@dataclass(frozen=True)
class SkillInput:
    """Validated, normalized input for a new skills repository."""

    brand_name: str
    skill_name: str
    skill_description: str


def validate_name(value: Optional[str]) -> Optional[str]:
    """Return an error message if ``value`` is not a usable name."""
    if not value or not value.strip():
        return "Name is required"
    if not normalize_name(value):
        return "Name must contain at least one letter or number"
    return None


def validate_description(value: Optional[str]) -> Optional[str]:
    """Return an error message if ``value`` is not a usable description."""
    if not value:
        return "Description is required"
    if len(value) > MAX_DESCRIPTION_LENGTH:
        return f"Description must be under {MAX_DESCRIPTION_LENGTH} characters"
    return None


def get_quiet_input(
    brand: Optional[str],
    name: Optional[str],
    description: Optional[str],
) -> SkillInput:
    """Validate input given on the command line without prompting.

    The brand defaults to the skill name.

    Raises:
        ValidationError: If a value is missing or invalid
    """
    if not name:
        raise ValidationError("--name is required in quiet mode")
    if not description:
        raise ValidationError("--description is required in quiet mode")

    brand = brand or name

    name_error = validate_name(name)
    if name_error:
        raise ValidationError(name_error)

    brand_error = validate_name(brand)
    if brand_error:
        raise ValidationError(f"Brand {brand_error.lower()}")

    description_error = validate_description(description)
    if description_error:
        raise ValidationError(description_error)

    return SkillInput(
        brand_name=normalize_name(brand),
        skill_name=normalize_name(name),
        skill_description=description,
    )


def _ask(console: Console, message: str, validate: Callable[[Optional[str]], Optional[str]]) -> str:
    while True:
        answer = Prompt.ask(message, console=console)
        error = validate(answer)
        if error is None:
            return answer
        console.print(f"[red]{error}[/red]")


def prompt_for_input(
    brand: Optional[str],
    name: Optional[str],
    description: Optional[str],
    console: Optional[Console] = None,
) -> SkillInput:
    """Ask for whichever values were not given on the command line.

    Args:
        brand: Brand from the command line, if any
        name: Skill name from the command line, if any
        description: Description from the command line, if any
        console: Console to prompt on

    Returns:
        Normalized input
    """
    console = console or Console()

    for given, validate in ((brand, validate_name), (name, validate_name), (description, validate_description)):
        error = validate(given) if given else None
        if error:
            raise ValidationError(error)

    brand = brand or _ask(console, "What is your brand/organization name? [dim](acme-corp)[/dim]", validate_name)
    name = name or _ask(console, "What is the name of your first skill? [dim](my-skill)[/dim]", validate_name)
    description = description or _ask(
        console, "Describe what this skill does and when to use it", validate_description
    )

    return SkillInput(
        brand_name=normalize_name(brand),
        skill_name=normalize_name(name),
        skill_description=description,
    )
