from palette.services.command_model import Command
from palette.services.command_ranker import SHORTCUT_EXACT_SCORE, fuzzy_match, score_command
from palette.services.command_registry import CommandRegistry
from palette.services.settings_service import RegistrySettings


def _cmd(name, **kw):
    return Command(name=name, effect=lambda a, p: None, **kw)


def _names(results):
    return [c.name for c in results]


def test_prefix_outranks_description_match():
    reg = CommandRegistry()
    reg.register(_cmd("open", description="open document", aliases=[":o"]))
    reg.register(_cmd("documents", description="open documents panel", aliases=[":d"]))
    results = reg.search("op")
    assert _names(results) == ["open", "documents"]
    assert results[0].aliases == (":o",)


def test_shortcut_exact_alias_is_unique_top_result():
    reg = CommandRegistry()
    reg.register(_cmd("documents", aliases=[":d"]))
    reg.register(_cmd("add"))
    reg.register(_cmd("delete", aliases=[":del"], description="delete document"))
    assert _names(reg.search(":d")) == ["documents"]
    assert reg.ranked(":d")[0][0] == SHORTCUT_EXACT_SCORE


def test_shortcut_query_ignores_trailing_arguments():
    reg = CommandRegistry()
    reg.register(_cmd("documents", aliases=[":d"]))
    assert _names(reg.search(":d notes")) == ["documents"]


def test_shortcut_query_without_exact_alias_matches_nothing_by_default():
    reg = CommandRegistry()
    reg.register(_cmd("delete", aliases=[":del"]))
    reg.register(_cmd("de"))
    assert reg.search(":de") == []


def test_shortcut_alias_prefix_fallback_when_enabled():
    reg = CommandRegistry(RegistrySettings(shortcut_alias_prefix=True))
    reg.register(_cmd("documents", aliases=[":d"]))
    reg.register(_cmd("delete", aliases=[":del"]))
    assert _names(reg.search(":de")) == ["delete"]
    assert _names(reg.search(":d")) == ["documents", "delete"]


def test_exact_multi_word_name_beats_description_match():
    reg = CommandRegistry()
    reg.register(_cmd("archive", description="archive a document"))
    reg.register(_cmd("new document"))
    assert reg.search("new document")[0].name == "new document"


def test_search_finds_alias_and_description_matches():
    reg = CommandRegistry()
    reg.register(_cmd("test", description="Test command", aliases=["t"]))
    reg.register(_cmd("save", description="Save document", category="document"))
    reg.register(_cmd("search", description="Search documents", category="search"))
    assert reg.search("test")[0].name == "test"
    assert "save" in _names(reg.search("sav"))
    assert "test" in _names(reg.search("t"))
    assert "save" in _names(reg.search("document"))


def test_name_tiers():
    save = _cmd("save", description="Persist the file", category="document")
    assert score_command(save, "save") == 1000 + 550
    assert score_command(save, "sav") == 800 + 550
    autosave = _cmd("autosave", description="Toggle", category="misc")
    assert score_command(autosave, "save") == 600


def test_multi_word_bonus():
    cmd = _cmd("export markdown file", description="Write output", category="misc")
    # all query words prefix some name word, plus the prefix tier
    assert score_command(cmd, "export mark") == 800 + 750
    # only one of two words matches
    assert score_command(cmd, "export pdf") == 400 + 100


def test_alias_tiers_are_cumulative():
    cmd = _cmd("persist", description="Store", category="misc", aliases=["sv", "xsvx", "svx"])
    assert score_command(cmd, "sv") == 900 + 500 + 700


def test_description_and_category_signals():
    cmd = _cmd("zap", description="Remove trailing spaces", category="cleanup")
    assert score_command(cmd, "trailing") == 200
    assert score_command(cmd, "clean") == 100


def test_fuzzy_fallback():
    md = _cmd("export markdown", description="Write md", category="misc")
    assert score_command(md, "exmd") == 300
    zap = _cmd("zap", description="remove trailing spaces", category="misc")
    assert score_command(zap, "rts") == 100
    assert score_command(zap, "qqq") == 0


def test_shortcut_scoring_only_considers_aliases():
    cmd = _cmd(":d in name", description=":d", aliases=[":d"])
    assert score_command(cmd, ":dx", shortcut=True) == 0
    assert score_command(cmd, ":d", shortcut=True) == 1500


def test_ties_broken_by_name():
    reg = CommandRegistry()
    reg.register(_cmd("beta open"))
    reg.register(_cmd("alpha open"))
    assert _names(reg.search("open")) == ["alpha open", "beta open"]


def test_results_capped_and_blank_query_lists_alphabetically():
    reg = CommandRegistry()
    for i in reversed(range(15)):
        reg.register(_cmd(f"cmd{i:02d}"))
    assert len(reg.search("cmd")) == 10
    assert _names(reg.search("")) == [f"cmd{i:02d}" for i in range(10)]
    assert _names(reg.search("   ")) == [f"cmd{i:02d}" for i in range(10)]


def test_unavailable_commands_are_not_ranked():
    reg = CommandRegistry()
    reg.register(_cmd("sync", condition=lambda: False))
    reg.register(_cmd("synchronize"))
    assert _names(reg.search("sync")) == ["synchronize"]


def test_search_reflects_table_changes():
    reg = CommandRegistry()
    reg.register(_cmd("open"))
    assert _names(reg.search("open")) == ["open"]
    reg.unregister("open")
    assert reg.search("open") == []


def test_fuzzy_match_subsequence():
    assert fuzzy_match("save", "sv")
    assert fuzzy_match("search", "srch")
    assert fuzzy_match("Document", "DCMNT")
    assert not fuzzy_match("test", "xyz")
    assert not fuzzy_match("ab", "ba")
    assert CommandRegistry.fuzzy_match("document", "dcmnt")
