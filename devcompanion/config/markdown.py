"""
Markdown Parser - Parse tool definition files with YAML frontmatter.

Tool files let users add or override external tools without code changes:

```markdown
---
name: Aider
command: aider
plugins: false
commands:
  commit: /commit
---

AI pair programming in the terminal.
```

The file name (without extension) is the tool id and the markdown body is
the description.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from ..logger import get_logger
from ..tool.registry import ToolDescriptor


class MarkdownParser:
    """Parse markdown tool files with YAML frontmatter.

    Example:
        parser = MarkdownParser()
        tool = parser.parse_file("/path/to/aider.md")
        print(tool.id)       # "aider"
        print(tool.command)  # "aider"
    """

    FRONTMATTER_PATTERN = re.compile(
        r'^---\s*\n(.*?)\n---\s*\n',
        re.DOTALL
    )

    def parse_file(self, file_path: Union[str, Path]) -> ToolDescriptor:
        """Parse a tool definition from a markdown file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the frontmatter is invalid
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Tool file not found: {file_path}")

        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()

        return self.parse_content(content, path.stem)

    def parse_content(self, content: str, tool_id: str) -> ToolDescriptor:
        """Parse a tool definition from markdown content.

        Args:
            content: Markdown content with YAML frontmatter
            tool_id: Tool id, usually the file name

        Returns:
            Parsed ToolDescriptor

        Raises:
            ValueError: If the frontmatter is invalid
        """
        frontmatter, body = self._extract_frontmatter(content)

        commands = frontmatter.get("commands") or {}
        if not isinstance(commands, dict):
            raise ValueError(f"'commands' must be a mapping in tool '{tool_id}'")

        return ToolDescriptor(
            id=tool_id,
            name=str(frontmatter.get("name", tool_id)),
            command=str(frontmatter.get("command", tool_id)),
            commands={str(k): str(v) for k, v in commands.items()},
            supports_plugins=bool(frontmatter.get("plugins", False)),
            description=body.strip(),
        )

    def _extract_frontmatter(self, content: str) -> Tuple[Dict[str, Any], str]:
        """Split content into (frontmatter dict, body)."""
        match = self.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        try:
            frontmatter = yaml.safe_load(match.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e

        if not isinstance(frontmatter, dict):
            raise ValueError("YAML frontmatter must be a mapping")

        return frontmatter, content[match.end():]


def load_tool_from_file(file_path: Union[str, Path]) -> ToolDescriptor:
    """Convenience function to load a tool definition from file."""
    return MarkdownParser().parse_file(file_path)


def load_all_tools(tools_dir: Union[str, Path]) -> List[ToolDescriptor]:
    """Load all tool definitions from a directory.

    Invalid files are logged and skipped.

    Args:
        tools_dir: Path to tools directory

    Returns:
        List of parsed ToolDescriptor objects, ordered by file name
    """
    tools_path = Path(tools_dir)
    if not tools_path.exists():
        return []

    parser = MarkdownParser()
    tools = []

    for md_file in sorted(tools_path.glob("*.md")):
        try:
            tools.append(parser.parse_file(md_file))
        except (OSError, ValueError) as e:
            get_logger().warn("config", "tool_file_skipped", {
                "path": str(md_file),
                "error": str(e),
            })

    return tools
