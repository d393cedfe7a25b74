"""Template materialization: copy, substitute placeholders, rename the skill directory."""

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Union

from .errors import (
    ScaffoldError,
    TEMPLATE_MISSING_MESSAGE,
    TargetExistsError,
    TemplateNotFoundError,
    humanize_error,
)
from .values import SKILL_NAME_PLACEHOLDER, TemplateValues

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def template_dir() -> Path:
    """Get the path of the template bundled with the package."""
    return Path(__file__).parent / "template"


def copy_dir(src: PathLike, dest: PathLike) -> None:
    """Recursively copy a directory tree, keeping file bytes unchanged.

    Args:
        src: Source directory
        dest: Destination directory, created along with any missing parents
    """
    src = Path(src)
    dest = Path(dest)
    dest.mkdir(parents=True, exist_ok=True)

    for entry in src.iterdir():
        target = dest / entry.name
        if entry.is_dir():
            copy_dir(entry, target)
        else:
            shutil.copyfile(entry, target)


def substitute(content: str, values: Mapping[str, str]) -> str:
    """Replace every ``{Key}`` token in ``content`` with its value.

    Tokens without a matching key are left as they are.

    Args:
        content: Text to process
        values: Placeholder key to replacement value

    Returns:
        The substituted text
    """
    for key, value in values.items():
        content = content.replace(f"{{{key}}}", value)
    return content


def replace_in_file(file_path: PathLike, values: Mapping[str, str]) -> None:
    """Substitute placeholders in a single file, rewriting it in place.

    Files that are not valid UTF-8 are left untouched.

    Args:
        file_path: File to rewrite
        values: Placeholder key to replacement value
    """
    file_path = Path(file_path)
    try:
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    except UnicodeDecodeError:
        logger.debug(f"Skipping non-text file: {file_path}")
        return

    with open(file_path, "w", encoding="utf-8", newline="") as f:
        f.write(substitute(content, values))


def process_directory(directory: PathLike, values: TemplateValues) -> None:
    """Materialize a copied template tree in place.

    File contents get their placeholders substituted. A directory named
    ``{Skill_Name}`` is renamed to the skill name before its contents are
    processed; no other directory or file name is touched.

    Args:
        directory: Root of the copied tree
        values: Template values
    """
    directory = Path(directory)
    mapping = values.as_dict()

    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if entry.name == SKILL_NAME_PLACEHOLDER:
                renamed = entry.rename(directory / values.Skill_Name)
                logger.debug(f"Renamed {entry} -> {renamed}")
                process_directory(renamed, values)
            else:
                process_directory(entry, values)
        else:
            replace_in_file(entry, mapping)


def _remove_tree(path: Path) -> None:
    """Delete a directory tree, logging instead of raising on failure."""
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning(f"Could not clean up {path}: {e}")


@contextmanager
def _cleanup_on_failure(target: Path) -> Iterator[Path]:
    """Remove ``target`` if the body raises, then let the error propagate."""
    try:
        yield target
    except Exception:
        logger.info(f"Removing partially created directory: {target}")
        _remove_tree(target)
        raise


def create_skill_repository(
    template_root: PathLike,
    target_root: PathLike,
    values: TemplateValues,
    force: bool = False,
) -> Path:
    """Create a new skills repository from a template.

    Args:
        template_root: Template directory to copy from (read only)
        target_root: Directory to create
        values: Template values
        force: Delete ``target_root`` first if it already exists

    Returns:
        Path to the created repository

    Raises:
        TemplateNotFoundError: If ``template_root`` does not exist
        TargetExistsError: If ``target_root`` exists and ``force`` is false
        ScaffoldError: If copying or processing fails; the partial tree is removed
    """
    template_root = Path(template_root)
    target_root = Path(target_root)

    if not template_root.exists():
        raise TemplateNotFoundError(TEMPLATE_MISSING_MESSAGE)

    if target_root.exists():
        if not force:
            raise TargetExistsError(f"Directory already exists: {target_root}")
        logger.info(f"Overwriting existing path: {target_root}")
        try:
            if target_root.is_dir() and not target_root.is_symlink():
                shutil.rmtree(target_root)
            else:
                target_root.unlink()
        except OSError as e:
            raise ScaffoldError(humanize_error(e)) from e

    logger.info(f"Creating the {values.Brand_Name} agent skills repository at {target_root}")

    try:
        with _cleanup_on_failure(target_root):
            copy_dir(template_root, target_root)
            process_directory(target_root, values)
    except Exception as e:
        raise ScaffoldError(humanize_error(e)) from e

    logger.info(f"Created skills repository: {target_root}")
    return target_root
