from devcompanion.tool import (
    BUILTIN_TOOLS,
    ToolConfig,
    ToolDescriptor,
    ToolRegistry,
    register_builtin_tools,
)


def test_register_is_idempotent(claude):
    registry = ToolRegistry()
    registry.register(claude)
    other = ToolDescriptor(id="claude", name="Other", command="other")

    assert registry.register(other) is claude
    assert registry.get("claude").name == "Claude Code"


def test_register_with_replace(claude):
    registry = ToolRegistry()
    registry.register(claude)
    other = ToolDescriptor(id="claude", name="Other", command="other")

    registry.register(other, replace=True)
    assert registry.get("claude").command == "other"


def test_activate_known_and_unknown(registry):
    assert registry.active.id == "claude"
    assert registry.activate("codex") is True
    assert registry.active.id == "codex"
    assert registry.activate("unknown") is False
    assert registry.active.id == "codex"


def test_snapshot_round_trips_through_wire_form(registry):
    config = ToolConfig.from_dict(registry.snapshot().to_dict())

    assert config.active_tool == registry.active
    assert list(config.available_tools) == ["claude", "codex"]
    assert config.available_tools["claude"].supports_plugins is True


def test_wire_form_uses_camel_case(claude):
    data = claude.to_dict()

    assert data["supportsPlugins"] is True
    assert data["commands"] == {"init": "/init", "commit": "/commit"}


def test_short_name_strips_suffixes(claude, codex):
    assert claude.short_name == "Claude"
    assert codex.short_name == "Codex"


def test_builtin_tools_registered():
    registry = ToolRegistry()
    register_builtin_tools(registry)
    register_builtin_tools(registry)

    assert registry.list_ids() == [tool.id for tool in BUILTIN_TOOLS]
    assert registry.active is None


def test_clear(registry):
    registry.clear()

    assert registry.list() == []
    assert registry.active is None
