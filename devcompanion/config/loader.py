"""
Configuration Loader - Load and merge configuration from multiple sources.

Configuration precedence (low → high):
1. ~/.devcompanion/config.json (global defaults)
2. .devcompanion/config.json (project config)
3. Environment variables (DEVCOMPANION_*)
4. Runtime overrides

Supports:
- JSON configuration files
- Deep merging of nested configs
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..logger import get_logger


@dataclass
class CompanionConfig:
    """Parsed devcompanion configuration.

    Attributes:
        structure_file: Structural map consumed by find-module
        tools_dir: Directory containing tool definition markdown files
        default_tool: Tool activated when the control process starts
        switch_timeout: Seconds a UI process waits for a switch answer
            before reverting (None waits forever)
        log_level: Logging level
        log_directory: Directory for log files
    """
    structure_file: str = "STRUCTURE.json"
    tools_dir: str = ".devcompanion/tools"
    default_tool: str = "claude"
    switch_timeout: Optional[float] = 10.0
    log_level: str = "INFO"
    log_directory: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "structure_file": self.structure_file,
            "tools_dir": self.tools_dir,
            "default_tool": self.default_tool,
            "switch_timeout": self.switch_timeout,
            "log_level": self.log_level,
            "log_directory": self.log_directory,
        }


class ConfigLoader:
    """Load configuration from multiple sources with precedence.

    Example:
        loader = ConfigLoader(project_root="/path/to/project")
        config = loader.load()
        print(config.default_tool)  # claude
    """

    ENV_MAPPINGS = {
        "DEVCOMPANION_STRUCTURE_FILE": "structure_file",
        "DEVCOMPANION_TOOLS_DIR": "tools_dir",
        "DEVCOMPANION_DEFAULT_TOOL": "default_tool",
        "DEVCOMPANION_SWITCH_TIMEOUT": "switch_timeout",
        "DEVCOMPANION_LOG_LEVEL": "log_level",
        "DEVCOMPANION_LOG_DIRECTORY": "log_directory",
    }

    def __init__(
        self,
        project_root: Optional[str] = None,
        home_dir: Optional[str] = None,
    ):
        """Initialize the config loader.

        Args:
            project_root: Project root directory (default: current working dir)
            home_dir: Home directory (default: user's home)
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self.home_dir = Path(home_dir) if home_dir else Path.home()

        self.global_config_path = self.home_dir / ".devcompanion" / "config.json"
        self.project_config_path = self.project_root / ".devcompanion" / "config.json"

    def load(self, **overrides: Any) -> CompanionConfig:
        """Load and merge configuration from all sources.

        Args:
            **overrides: Runtime values that win over every other source

        Returns:
            Merged CompanionConfig object
        """
        config_dict: Dict[str, Any] = {}

        if self.global_config_path.exists():
            config_dict = self._deep_merge(config_dict, self._load_json(self.global_config_path))

        if self.project_config_path.exists():
            config_dict = self._deep_merge(config_dict, self._load_json(self.project_config_path))

        config_dict = self._apply_env_vars(config_dict)
        config_dict = self._deep_merge(
            config_dict, {k: v for k, v in overrides.items() if v is not None}
        )

        defaults = CompanionConfig()
        return CompanionConfig(
            structure_file=config_dict.get("structure_file", defaults.structure_file),
            tools_dir=config_dict.get("tools_dir", defaults.tools_dir),
            default_tool=config_dict.get("default_tool", defaults.default_tool),
            switch_timeout=self._parse_timeout(
                config_dict.get("switch_timeout", defaults.switch_timeout)
            ),
            log_level=config_dict.get("log_level", defaults.log_level),
            log_directory=config_dict.get("log_directory"),
        )

    def _load_json(self, path: Path) -> Dict[str, Any]:
        """Load a JSON configuration file.

        Returns:
            Parsed JSON as dict, or empty dict on error
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            get_logger().warn("config", "config_unreadable", {"path": str(path), "error": str(e)})
            return {}

        if not isinstance(data, dict):
            get_logger().warn("config", "config_not_object", {"path": str(path)})
            return {}
        return data

    def _deep_merge(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Deep merge two dictionaries. Values from override take precedence."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply DEVCOMPANION_* environment variable overrides."""
        for env_var, config_key in self.ENV_MAPPINGS.items():
            value = os.environ.get(env_var)
            if value is not None:
                config[config_key] = value
        return config

    @staticmethod
    def _parse_timeout(value: Any) -> Optional[float]:
        """Parse a switch timeout; empty, 'none' and non-positive values disable it.

        Anything that is not a number falls back to the default timeout.
        """
        if value is None:
            return None
        if isinstance(value, str) and value.strip().lower() in ("", "none", "off"):
            return None
        if not isinstance(value, bool):
            try:
                seconds = float(value)
            except (TypeError, ValueError):
                pass
            else:
                return seconds if seconds > 0 else None
        get_logger().warn("config", "invalid_switch_timeout", {"value": value})
        return CompanionConfig.switch_timeout

    def resolve(self, relative: str) -> Path:
        """Resolve a configured path against the project root."""
        if os.path.isabs(relative):
            return Path(relative)
        return self.project_root / relative

    def get_structure_path(self, config: Optional[CompanionConfig] = None) -> Path:
        """Get the resolved structural map path."""
        config = config or self.load()
        return self.resolve(config.structure_file)

    def get_tools_dir(self, config: Optional[CompanionConfig] = None) -> Path:
        """Get the resolved tool definition directory."""
        config = config or self.load()
        return self.resolve(config.tools_dir)

    def list_tool_files(self) -> List[Path]:
        """List all tool definition markdown files."""
        tools_dir = self.get_tools_dir()
        if not tools_dir.exists():
            return []
        return sorted(tools_dir.glob("*.md"))


def load_config(project_root: Optional[str] = None) -> CompanionConfig:
    """Convenience function to load configuration.

    Args:
        project_root: Optional project root directory

    Returns:
        Loaded CompanionConfig
    """
    return ConfigLoader(project_root=project_root).load()
