import pytest

from palette.services.command_errors import InvalidCommandError
from palette.services.command_model import Command
from palette.services.command_registry import CommandRegistry
from palette.services.event_bus import EventBus
from palette.services.settings_service import RegistrySettings


def _noop(args, parsed):
    return None


def test_register_and_list():
    reg = CommandRegistry()
    stored = reg.register(Command(name="app refresh", effect=_noop, aliases=[":r"]))
    assert stored.registered_at is not None
    assert reg.has(":r") and reg.has("app refresh")
    assert [c.name for c in reg.get_all()] == ["app refresh"]
    assert reg.count() == 1


def test_register_many_and_categories():
    reg = CommandRegistry()
    reg.register_many(
        [
            {"name": "save", "handler": _noop, "category": "document"},
            {"name": "find", "handler": _noop, "category": "search"},
        ]
    )
    assert reg.categories() == ["document", "search"]
    assert [c.name for c in reg.get_by_category("search")] == ["find"]


def test_reject_policy_from_settings():
    reg = CommandRegistry(RegistrySettings(collision_policy="reject"))
    reg.register(Command(name="save", effect=_noop))
    with pytest.raises(InvalidCommandError):
        reg.register(Command(name="save", effect=_noop))


def test_settings_limits_flow_through(run):
    reg = CommandRegistry(RegistrySettings(history_limit=2, search_limit=2))
    for name in ("a1", "a2", "a3"):
        reg.register(Command(name=name, effect=_noop))
    assert len(reg.search("a")) == 2
    for name in ("a1", "a2", "a3"):
        run(reg.execute(name))
    assert reg.history.all() == ["a3", "a2"]


def test_custom_shortcut_prefix():
    reg = CommandRegistry(RegistrySettings(shortcut_prefix="/"))
    reg.register(Command(name="documents", effect=_noop, aliases=["/d"]))
    assert reg.search("/d")[0].name == "documents"
    assert reg.parse("/documents").name == "documents"


def test_shared_bus():
    bus = EventBus()
    reg = CommandRegistry(bus=bus)
    assert reg.bus is bus
    assert reg.dispatcher.bus is bus


def test_stats(run):
    reg = CommandRegistry()
    reg.register(Command(name="save", effect=_noop, aliases=[":s", "sv"], category="document"))
    reg.register(Command(name="push", effect=_noop, category="git", condition=lambda: False))
    run(reg.execute("save"))
    stats = reg.stats()
    assert stats.total_commands == 2
    assert stats.total_aliases == 2
    assert stats.total_categories == 2
    assert stats.history_length == 1
    assert stats.available_commands == 1
