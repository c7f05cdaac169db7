import json
import logging

import pytest

from palette.services.command_errors import CommandNotFoundError
from palette.services.command_model import Command
from palette.services.command_registry import CommandRegistry
from palette.services.logging_service import LoggingService


@pytest.fixture()
def svc():
    service = LoggingService(capacity=5)
    service.attach()
    yield service
    service.detach()


def test_logging_capture_and_retrieve(svc):
    logging.getLogger("palette.alpha").info("Hello World")
    assert any(e.message == "Hello World" for e in svc.recent())


def test_records_outside_package_are_ignored(svc):
    logging.getLogger("elsewhere").warning("not ours")
    assert all(e.message != "not ours" for e in svc.recent())


def test_logging_capacity_eviction(svc):
    for i in range(10):
        logging.getLogger("palette.cap").info("M%d", i)
    recents = svc.recent()
    assert len(recents) == 5  # capacity
    assert recents[0].message.endswith("5")  # first retained after evictions
    assert [e.message for e in svc.recent(2)] == ["M8", "M9"]


def test_logging_filtering(svc):
    logging.getLogger("palette.table").debug("registered")
    logging.getLogger("palette.dispatch").info("executed")
    info_only = svc.filter(level="INFO")
    assert info_only and all(e.level == "INFO" for e in info_only)
    dispatch = svc.filter(name_contains="dispatch")
    assert dispatch and all("dispatch" in e.name for e in dispatch)


def test_registry_activity_is_captured(run):
    svc = LoggingService(capacity=50)
    svc.attach()
    registry = CommandRegistry()
    registry.register(Command(name="save", effect=lambda a, p: None))
    run(registry.execute("save"))
    with pytest.raises(CommandNotFoundError):
        run(registry.execute("ghost"))
    svc.detach()
    assert svc.filter(level="INFO")
    warnings = svc.filter(level="WARNING")
    assert warnings and "ghost" in warnings[-1].message


def test_detach_stops_capture(svc):
    svc.detach()
    assert svc.attached is False
    logging.getLogger("palette.late").info("after detach")
    assert all(e.message != "after detach" for e in svc.recent())


def test_export_jsonl(svc, tmp_path):
    logging.getLogger("palette.export").warning("W1")
    logging.getLogger("palette.export").info("I1")
    out = tmp_path / "logs.jsonl"
    written = svc.export_jsonl(str(out), level="WARNING")
    assert written == 1
    lines = out.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["message"] == "W1"
    svc.clear()
    assert svc.recent() == []
