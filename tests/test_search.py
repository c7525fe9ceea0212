import pytest

from devcompanion.structure import (
    MatchType,
    ModuleSearchEngine,
    NoIndexError,
    StructureIndex,
    load_structure,
)


@pytest.fixture
def engine(structure_file):
    return ModuleSearchEngine(load_structure(structure_file))


def test_exact_match_returns_single_group(engine):
    groups = engine.search("github")

    assert len(groups) == 1
    group = groups[0]
    assert group.feature == "github"
    assert group.match_type is MatchType.EXACT
    assert group.files == ["src/main/github.js", "src/renderer/githubPanel.js"]


def test_exact_match_is_case_insensitive(engine):
    groups = engine.search("GitHub")

    assert [(g.feature, g.match_type) for g in groups] == [("github", MatchType.EXACT)]


def test_exact_match_suppresses_partial(engine):
    # "terminal-tabs" also contains "terminal" but the exact tier already matched
    groups = engine.search("terminal")

    assert [g.feature for g in groups] == ["terminal"]
    assert groups[0].match_type is MatchType.EXACT


def test_partial_match_keyword_inside_feature(engine):
    groups = engine.search("term")

    assert [g.feature for g in groups] == ["terminal", "terminal-tabs"]
    assert all(g.match_type is MatchType.PARTIAL for g in groups)


def test_partial_match_feature_inside_keyword(engine):
    groups = engine.search("github-data")

    assert [(g.feature, g.match_type) for g in groups] == [("github", MatchType.PARTIAL)]


def test_partial_match_suppresses_deep(engine):
    # "main/tasks" would match in the deep tier as well
    groups = engine.search("task")

    assert len(groups) == 1
    assert groups[0].feature == "tasks"
    assert groups[0].match_type is MatchType.PARTIAL


def test_deep_match_on_description(engine):
    groups = engine.search("xterm")

    assert len(groups) == 1
    group = groups[0]
    assert group.feature == 'search: "xterm"'
    assert group.match_type is MatchType.DEEP
    assert group.modules[0].module == "renderer/terminal"
    assert group.modules[0].description == "xterm.js wrapper"
    assert group.channels == ("terminal-output", "terminal-input")


def test_deep_match_on_exports_and_channels(engine):
    by_export = engine.search("supportsFeature")
    by_channel = engine.search("ai-tool-changed")

    assert by_export[0].files == ["src/renderer/aiToolSelector.js"]
    assert by_channel[0].files == ["src/renderer/aiToolSelector.js"]


def test_deep_match_aggregates_all_hits_into_one_group(engine):
    groups = engine.search("renderer/")

    assert len(groups) == 1
    assert groups[0].files == [
        "src/renderer/githubPanel.js",
        "src/renderer/terminal.js",
        "src/renderer/aiToolSelector.js",
    ]


def test_no_match_returns_empty_list(engine):
    assert engine.search("kubernetes") == []


def test_channels_are_deduplicated_union(engine):
    group = engine.search("github")[0]

    assert group.channels == ("github-fetch", "github-data")


def test_references_without_module_key_have_no_channels():
    index = StructureIndex.from_dict({
        "modules": {},
        "intentIndex": {"docs": [{"file": "README.md"}]},
    })

    group = ModuleSearchEngine(index).search("docs")[0]
    assert group.channels == ()


def test_exact_group_wins_over_related_partial_feature():
    index = StructureIndex.from_dict({
        "modules": {},
        "intentIndex": {
            "github": [{"file": "a.js"}],
            "git-hub-panel": [{"file": "b.js"}],
        },
    })

    groups = ModuleSearchEngine(index).search("github")

    assert len(groups) == 1
    assert groups[0].feature == "github"
    assert groups[0].match_type is MatchType.EXACT
    assert groups[0].files == ["a.js"]


@pytest.mark.parametrize("keyword", ["github", "GitHub", "GITHUB"])
def test_keys_differing_only_by_case_give_one_exact_group(keyword):
    index = StructureIndex.from_dict({
        "modules": {},
        "intentIndex": {
            "GitHub": [{"file": "upper.js"}],
            "github": [{"file": "lower.js"}],
        },
    })

    groups = ModuleSearchEngine(index).search(keyword)

    assert len(groups) == 1
    assert groups[0].match_type is MatchType.EXACT
    assert groups[0].feature == "github"
    assert groups[0].files == ["lower.js"]


def test_first_case_folded_key_wins_without_lower_case_key():
    index = StructureIndex.from_dict({
        "modules": {},
        "intentIndex": {"GitHub": [{"file": "a.js"}], "GITHUB": [{"file": "b.js"}]},
    })

    groups = ModuleSearchEngine(index).search("github")

    assert [(g.feature, g.match_type) for g in groups] == [("GitHub", MatchType.EXACT)]


def test_search_without_intent_index_raises():
    index = StructureIndex.from_dict({"modules": {"a": {"file": "a.js"}}})

    with pytest.raises(NoIndexError):
        ModuleSearchEngine(index).search("a")


def test_search_is_repeatable(engine):
    assert engine.search("term") == engine.search("term")


def test_list_features_counts(engine):
    listing = engine.list_features()

    assert listing.feature_count == 4
    assert listing.module_count == 5
    assert listing.features[0] == (
        "github",
        ("src/main/github.js", "src/renderer/githubPanel.js"),
    )


def test_list_features_without_intent_index_raises():
    with pytest.raises(NoIndexError):
        ModuleSearchEngine(StructureIndex.from_dict({})).list_features()
