"""Exception types for build-skill."""

import errno


class BuildSkillError(Exception):
    """Base class for all build-skill errors."""


class ValidationError(BuildSkillError):
    """Raised when user input is rejected before anything touches the disk."""


class TemplateNotFoundError(BuildSkillError):
    """Raised when the template directory does not exist."""


class TargetExistsError(BuildSkillError):
    """Raised when the target directory exists and overwriting was not requested."""


class ScaffoldError(BuildSkillError):
    """Raised when copying or materializing the template fails."""


class FrontmatterError(BuildSkillError):
    """Raised when a SKILL.md file has no well-formed frontmatter block."""


class ManifestError(BuildSkillError):
    """Raised when manifest.json is missing or cannot be parsed."""


class SkillExistsError(BuildSkillError):
    """Raised when adding a skill whose SKILL.md is already present."""


TEMPLATE_MISSING_MESSAGE = "Template directory not found. Please reinstall build-skill."


def humanize_error(error: BaseException) -> str:
    """Turn an exception into a message suitable for the terminal.

    Args:
        error: The exception raised while scaffolding

    Returns:
        A friendly message for the common filesystem failures, otherwise the
        exception's own message
    """
    if isinstance(error, OSError):
        if error.errno == errno.ENOENT:
            return TEMPLATE_MISSING_MESSAGE
        if error.errno in (errno.EACCES, errno.EPERM):
            return "Permission denied. Check write permissions for the output directory."
        if error.errno == errno.ENOSPC:
            return "No space left on device."
    message = str(error)
    return message or "An unknown error occurred"
