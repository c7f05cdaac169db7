"""Application bootstrap for the command palette core.

``init()`` builds everything a host application needs at start-up and hands it
back in one ``PaletteContext``:
 - the ``CommandRegistry`` (with built-in introspection commands by default)
 - a per-context ``ServiceLocator`` holding the shared objects by key
 - the in-process ``LoggingService`` attached to the ``palette`` logger
 - an ``ErrorJournal`` listening to dispatcher ``error`` notifications
 - the ``CategoryCatalog`` for grouped palette views

The context lives for the process; ``shutdown()`` exists for tests and for
hosts that want to detach handlers explicitly.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..services.builtin_commands import register_builtin_commands
from ..services.command_categories import CategoryCatalog
from ..services.command_registry import CommandRegistry
from ..services.error_journal import ErrorJournal
from ..services.logging_service import LoggingService
from ..services.service_locator import ServiceLocator
from ..services.settings_service import RegistrySettings, load_settings

__all__ = ["PaletteContext", "init"]

_log = logging.getLogger(__name__)


@dataclass
class PaletteContext:
    """Container with references created during bootstrap.

    Attributes
    ----------
    registry: The command registry every feature module registers into
    services: Locator with keys settings, command_registry, event_bus,
        logging_service, error_journal, category_catalog
    settings: Effective registry settings
    logging_service: Ring-buffer log capture (attached unless disabled)
    error_journal: Recorder of failed executions
    categories: Category metadata and grouping helper
    started_at: Monotonic timestamp when bootstrap started
    duration_s: Total elapsed seconds for bootstrap
    """

    registry: CommandRegistry
    services: ServiceLocator
    settings: RegistrySettings
    logging_service: LoggingService
    error_journal: ErrorJournal
    categories: CategoryCatalog
    started_at: float
    duration_s: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def shutdown(self) -> None:
        self.error_journal.detach()
        self.logging_service.detach()


def init(
    settings: Optional[RegistrySettings] = None,
    *,
    config_path: str | Path | None = None,
    attach_logging: bool = True,
    builtins: bool = True,
) -> PaletteContext:
    """Create and initialize a palette context.

    ``settings`` wins over ``config_path``; with neither, defaults (and their
    environment overrides) apply.
    """
    started = time.perf_counter()
    if settings is None:
        settings = load_settings(config_path) if config_path is not None else RegistrySettings()

    logging_service = LoggingService(capacity=settings.log_capacity)
    if attach_logging:
        logging_service.attach()

    registry = CommandRegistry(settings)
    if builtins:
        register_builtin_commands(registry)

    journal = ErrorJournal()
    journal.attach(registry)
    catalog = CategoryCatalog(registry)

    locator = ServiceLocator()
    locator.register("settings", settings, origin=__name__)
    locator.register("command_registry", registry, origin=__name__)
    locator.register("event_bus", registry.bus, origin=__name__)
    locator.register("logging_service", logging_service, origin=__name__)
    locator.register("error_journal", journal, origin=__name__)
    locator.register("category_catalog", catalog, origin=__name__)

    duration = time.perf_counter() - started
    _log.info("Palette initialized with %d command(s) in %.4fs", registry.count(), duration)
    return PaletteContext(
        registry=registry,
        services=locator,
        settings=settings,
        logging_service=logging_service,
        error_journal=journal,
        categories=catalog,
        started_at=started,
        duration_s=duration,
        metadata={"builtins": builtins},
    )
