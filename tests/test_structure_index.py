import pytest

from devcompanion.structure import (
    ConfigLoadError,
    ModuleDescriptor,
    NoIndexError,
    StructureIndex,
    load_structure,
)


def test_load_structure_reads_modules_and_index(structure_file):
    index = load_structure(structure_file)

    assert index.source == str(structure_file)
    assert list(index.modules) == [
        "main/github",
        "renderer/githubPanel",
        "renderer/terminal",
        "renderer/aiToolSelector",
        "main/tasks",
    ]
    assert index.features() == ["github", "terminal", "terminal-tabs", "tasks"]
    assert [ref.file for ref in index.lookup("github")] == [
        "src/main/github.js",
        "src/renderer/githubPanel.js",
    ]


def test_missing_file_raises_config_load_error(tmp_path):
    with pytest.raises(ConfigLoadError) as exc_info:
        load_structure(tmp_path / "STRUCTURE.json")
    assert "Could not read STRUCTURE.json" in str(exc_info.value)


def test_invalid_json_raises_config_load_error(tmp_path):
    path = tmp_path / "STRUCTURE.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigLoadError):
        load_structure(path)


def test_non_object_document_raises_config_load_error(tmp_path):
    path = tmp_path / "STRUCTURE.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ConfigLoadError):
        load_structure(path)


def test_missing_intent_index_is_reported_on_access():
    index = StructureIndex.from_dict({"modules": {}}, source="STRUCTURE.json")

    assert not index.has_intent_index
    with pytest.raises(NoIndexError) as exc_info:
        index.features()
    assert "npm run structure" in str(exc_info.value)


def test_document_without_modules_has_no_modules():
    index = StructureIndex.from_dict({"intentIndex": {}})

    assert index.modules == {}
    assert index.features() == []


def test_module_descriptor_defaults_and_dedup():
    mod = ModuleDescriptor.from_dict("main/ipc", {
        "file": "src/main/ipc.js",
        "exports": ["a", "b", "a"],
        "ipc": {"listens": ["x", "y"], "emits": ["y", "z"]},
    })

    assert mod.description == ""
    assert mod.exports == ("a", "b")
    assert mod.channels == ("x", "y", "z")
    assert mod.searchable_text() == "main/ipc  a b x y y z"


def test_lookup_unknown_feature_is_empty(structure_file):
    assert load_structure(structure_file).lookup("nope") == ()


@pytest.mark.parametrize("document", [
    {"modules": {"a": "oops"}, "intentIndex": {}},
    {"modules": {"a": {"file": "a.js", "ipc": ["x"]}}, "intentIndex": {}},
    {"modules": {"a": {"file": "a.js", "exports": "run"}}, "intentIndex": {}},
    {"modules": {"a": {"file": "a.js", "ipc": {"listens": "x"}}}, "intentIndex": {}},
    {"intentIndex": {"github": "src/main/github.js"}},
    {"intentIndex": {"github": ["src/main/github.js"]}},
])
def test_malformed_entries_raise_config_load_error(document):
    with pytest.raises(ConfigLoadError) as exc_info:
        StructureIndex.from_dict(document, source="STRUCTURE.json")
    assert "Could not read STRUCTURE.json" in str(exc_info.value)


def test_non_text_descriptions_are_coerced():
    index = StructureIndex.from_dict({
        "modules": {"a": {"file": "a.js", "description": 42, "exports": [1]}},
        "intentIndex": {"a": [{"file": "a.js", "module": "a", "description": 7}]},
    })

    assert index.modules["a"].description == "42"
    assert index.modules["a"].searchable_text() == "a 42 1"
    assert index.lookup("a")[0].description == "7"
