import json

import pytest

from devcompanion.logger import configure_logger
from devcompanion.tool import ToolDescriptor, ToolRegistry


@pytest.fixture(autouse=True)
def quiet_logger(monkeypatch):
    """Keep test runs from writing log files."""
    monkeypatch.setenv("DEVCOMPANION_LOG_ENABLED", "0")
    for var in (
        "DEVCOMPANION_STRUCTURE_FILE",
        "DEVCOMPANION_TOOLS_DIR",
        "DEVCOMPANION_DEFAULT_TOOL",
        "DEVCOMPANION_SWITCH_TIMEOUT",
        "DEVCOMPANION_LOG_LEVEL",
        "DEVCOMPANION_LOG_DIRECTORY",
        "DEVCOMPANION_LOG_CONSOLE",
        "DEVCOMPANION_SESSION_ID",
    ):
        monkeypatch.delenv(var, raising=False)
    configure_logger(enabled=False)
    yield
    configure_logger(enabled=False)


@pytest.fixture
def structure_data():
    return {
        "modules": {
            "main/github": {
                "file": "src/main/github.js",
                "description": "GitHub API client",
                "exports": ["fetchIssues", "createPullRequest"],
                "ipc": {"listens": ["github-fetch"], "emits": ["github-data"]},
            },
            "renderer/githubPanel": {
                "file": "src/renderer/githubPanel.js",
                "description": "GitHub sidebar panel",
                "exports": ["init"],
                "ipc": {"listens": ["github-data"], "emits": ["github-fetch"]},
            },
            "renderer/terminal": {
                "file": "src/renderer/terminal.js",
                "description": "xterm.js wrapper",
                "exports": ["createTerminal", "resize"],
                "ipc": {"listens": ["terminal-output"], "emits": ["terminal-input"]},
            },
            "renderer/aiToolSelector": {
                "file": "src/renderer/aiToolSelector.js",
                "description": "Switch between AI coding tools",
                "exports": ["getStartCommand", "supportsFeature"],
                "ipc": {"listens": ["ai-tool-changed"], "emits": []},
            },
            "main/tasks": {
                "file": "src/main/tasks.js",
            },
        },
        "intentIndex": {
            "github": [
                {"module": "main/github", "file": "src/main/github.js",
                 "description": "GitHub API client"},
                {"module": "renderer/githubPanel", "file": "src/renderer/githubPanel.js",
                 "description": "GitHub sidebar panel"},
            ],
            "terminal": [
                {"module": "renderer/terminal", "file": "src/renderer/terminal.js",
                 "description": "xterm.js wrapper"},
            ],
            "terminal-tabs": [
                {"module": "renderer/terminal", "file": "src/renderer/terminal.js"},
            ],
            "tasks": [
                {"module": "main/tasks", "file": "src/main/tasks.js"},
            ],
        },
    }


@pytest.fixture
def structure_file(tmp_path, structure_data):
    path = tmp_path / "STRUCTURE.json"
    path.write_text(json.dumps(structure_data), encoding="utf-8")
    return path


@pytest.fixture
def claude():
    return ToolDescriptor(
        id="claude",
        name="Claude Code",
        command="claude",
        commands={"init": "/init", "commit": "/commit"},
        supports_plugins=True,
    )


@pytest.fixture
def codex():
    return ToolDescriptor(
        id="codex",
        name="Codex CLI",
        command="codex",
        commands={"init": "/init"},
        supports_plugins=False,
    )


@pytest.fixture
def registry(claude, codex):
    registry = ToolRegistry()
    registry.register(claude)
    registry.register(codex)
    registry.activate("claude")
    return registry
