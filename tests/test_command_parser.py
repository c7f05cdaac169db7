from palette.services.command_model import Command
from palette.services.command_parser import CommandParser, split_head
from palette.services.command_registry import CommandRegistry


def _registry(*entries):
    reg = CommandRegistry()
    for name, aliases in entries:
        reg.register(Command(name=name, effect=lambda a, p: None, aliases=aliases))
    return reg


def test_parse_simple_and_with_arguments():
    reg = _registry(("test", ["t"]))
    parsed = reg.parse("test")
    assert parsed.name == "test" and parsed.args == []
    parsed = reg.parse("test arg1 arg2")
    assert parsed.name == "test" and parsed.args == ["arg1", "arg2"]
    assert parsed.raw_input == "test arg1 arg2"
    assert parsed.clean_input == "test arg1 arg2"


def test_longest_match_wins_for_multi_word_names():
    reg = _registry(("search", []), ("search advanced", []))
    parsed = reg.parse("search advanced now")
    assert parsed.name == "search advanced"
    assert parsed.args == ["now"]
    parsed = reg.parse("search now")
    assert parsed.name == "search"
    assert parsed.args == ["now"]


def test_candidate_requires_word_boundary():
    reg = _registry(("search", []))
    parsed = reg.parse("searchable things")
    # no boundary match: falls back to the first token
    assert parsed.name == "searchable"
    assert parsed.args == ["things"]


def test_matching_is_case_insensitive_and_returns_canonical_name():
    reg = _registry(("toggle theme", []))
    parsed = reg.parse("Toggle THEME dark")
    assert parsed.name == "toggle theme"
    assert parsed.args == ["dark"]


def test_shortcut_prefix_is_stripped():
    reg = _registry(("test", ["t"]))
    parsed = reg.parse(":test")
    assert parsed.name == "test"
    assert parsed.clean_input == "test"


def test_extra_whitespace():
    reg = _registry(("test", []))
    parsed = reg.parse("  :test  arg1  arg2  ")
    assert parsed.name == "test"
    assert parsed.args == ["arg1", "arg2"]


def test_shortcut_alias_with_arguments():
    reg = _registry(("documents", [":d"]))
    parsed = reg.parse(":d notes")
    assert parsed.name == ":d"
    assert parsed.args == ["notes"]
    assert reg.get(parsed.name).name == "documents"


def test_unknown_input_falls_back_to_naive_split():
    reg = _registry(("test", []))
    parsed = reg.parse("unknown a b")
    assert parsed.name == "unknown"
    assert parsed.args == ["a", "b"]
    parsed = reg.parse(":nope x")
    assert parsed.name == ":nope"
    assert parsed.args == ["x"]


def test_empty_input_never_fails():
    reg = _registry(("test", []))
    parsed = reg.parse("   ")
    assert parsed.name == ""
    assert parsed.args == []


def test_parser_reflects_current_candidates():
    names = ["open"]
    parser = CommandParser(lambda: names)
    assert parser.parse("open file").name == "open"
    names.append("open file")
    assert parser.parse("open file").name == "open file"


def test_custom_prefix():
    parser = CommandParser(lambda: ["/go"], shortcut_prefix="/")
    parsed = parser.parse("/go home")
    assert parsed.name == "/go"
    assert parsed.args == ["home"]


def test_split_head():
    assert split_head(":d some args") == (":d", "some args")
    assert split_head(":d") == (":d", "")
