"""Configuration loader for build-skill."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = Path("~/.config/build-skill/config.yaml")


@dataclass(frozen=True)
class BuildDefaults:
    """Fallback values used when the command line leaves something out."""

    output_dir: str = "."
    license: str = "MIT"
    homepage: str = "https://example.com"
    keywords: str = "ai, agent, skill"
    category: str = "general"
    creator_name: str = "Your Name"
    creator_email: str = "your.email@example.com"


class Config:
    """Configuration manager for build-skill."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration.

        Args:
            config_path: Path to a YAML configuration file. Falls back to the
                BUILD_SKILL_CONFIG environment variable, then to
                ~/.config/build-skill/config.yaml. A missing file means defaults.
        """
        load_dotenv()
        if config_path is None:
            config_path = os.environ.get("BUILD_SKILL_CONFIG") or DEFAULT_CONFIG_PATH
        self.config_path = Path(config_path).expanduser()
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from the YAML file, if there is one."""
        if not self.config_path.is_file():
            return

        with open(self.config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if isinstance(data, dict):
            self._config = data

    def _substitute_env_vars(self, value: str) -> str:
        """Substitute environment variables in configuration values.

        Args:
            value: String that may be a ${VAR} pattern

        Returns:
            String with the environment variable substituted
        """
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            var_name = value[2:-1]
            return os.environ.get(var_name, "")
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key.

        Args:
            key: Dot-separated configuration key (e.g., 'defaults.license')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value: Any = self._config

        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        if isinstance(value, str):
            value = self._substitute_env_vars(value)

        return value

    def _get_str(self, key: str, default: str) -> str:
        value = self.get(key)
        return str(value) if value not in (None, "") else default

    def build_defaults(self) -> BuildDefaults:
        """Get the defaults used to fill template values."""
        base = BuildDefaults()
        return BuildDefaults(
            output_dir=self._get_str("defaults.output_dir", base.output_dir),
            license=self._get_str("defaults.license", base.license),
            homepage=self._get_str("defaults.homepage", base.homepage),
            keywords=self._get_str("defaults.keywords", base.keywords),
            category=self._get_str("defaults.category", base.category),
            creator_name=self._get_str("defaults.creator_name", base.creator_name),
            creator_email=self._get_str("defaults.creator_email", base.creator_email),
        )

    @property
    def plugin_extra_fields(self) -> Mapping[str, Mapping[str, Any]]:
        """Get extra fields merged into each platform's plugin.json."""
        extras = self.get("sync.plugin_extra_fields", {})
        if not isinstance(extras, dict):
            return {}
        return {platform: fields for platform, fields in extras.items() if isinstance(fields, dict)}
