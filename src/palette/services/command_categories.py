"""Category catalog for grouping palette commands.

Holds display metadata (name, icon, priority, description) per category key
and answers grouping queries over a registry. Lower priority values sort
first. Commands whose category has no metadata are shown with the
``general`` entry's metadata under their own key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..config import settings
from .command_model import Command
from .command_registry import CommandRegistry
from .command_table import sort_by_name

__all__ = ["CategoryInfo", "CategoryGroup", "CategoryCatalog", "DEFAULT_CATEGORIES"]

GENERAL = settings.DEFAULT_CATEGORY
FALLBACK_PRIORITY = 999


@dataclass(frozen=True)
class CategoryInfo:
    key: str
    name: str
    icon: str = settings.DEFAULT_ICON
    priority: int = FALLBACK_PRIORITY
    description: str = ""


@dataclass
class CategoryGroup:
    info: CategoryInfo
    commands: List[Command] = field(default_factory=list)


DEFAULT_CATEGORIES = (
    CategoryInfo("document", "Documents", "📄", 1, "Document management and editing commands"),
    CategoryInfo("git", "Git", "🔧", 2, "Version control and Git operations"),
    CategoryInfo("search", "Search", "🔍", 3, "Search and navigation commands"),
    CategoryInfo("export", "Export", "📤", 4, "Export and sharing commands"),
    CategoryInfo("preferences", "Preferences", "⚙️", 5, "Settings and customization"),
    CategoryInfo("about", "About & Help", "ℹ️", 10, "Information, help, and legal"),
    CategoryInfo(GENERAL, "General", settings.DEFAULT_ICON, FALLBACK_PRIORITY, "General commands"),
)


class CategoryCatalog:
    def __init__(
        self, registry: CommandRegistry, categories: Iterable[CategoryInfo] = DEFAULT_CATEGORIES
    ) -> None:
        self._registry = registry
        self._configs: Dict[str, CategoryInfo] = {c.key: c for c in categories}
        if GENERAL not in self._configs:
            self._configs[GENERAL] = DEFAULT_CATEGORIES[-1]

    # Configuration ------------------------------------------------
    def add_category(
        self,
        key: str,
        name: Optional[str] = None,
        *,
        icon: Optional[str] = None,
        priority: Optional[int] = None,
        description: Optional[str] = None,
    ) -> CategoryInfo:
        display = name or key
        info = CategoryInfo(
            key=key,
            name=display,
            icon=icon or settings.DEFAULT_ICON,
            priority=priority if priority is not None else FALLBACK_PRIORITY,
            description=description or f"{display} commands",
        )
        self._configs[key] = info
        return info

    def remove_category(self, key: str) -> bool:
        if key == GENERAL or key not in self._configs:
            return False
        del self._configs[key]
        return True

    def configs(self) -> Dict[str, CategoryInfo]:
        return dict(self._configs)

    def is_valid(self, category: str) -> bool:
        return bool(category and category.strip()) and category in self._configs

    def info(self, category: str) -> CategoryInfo:
        return self._configs.get(category) or self._configs[GENERAL]

    def display_name(self, category: str) -> str:
        return self.info(category).name

    def icon(self, category: str) -> str:
        return self.info(category).icon

    def description(self, category: str) -> str:
        return self.info(category).description

    def priority(self, category: str) -> int:
        return self.info(category).priority

    def category_order(self) -> List[str]:
        return sorted(self._configs, key=lambda k: (self._configs[k].priority, k))

    # Queries ------------------------------------------------------
    def group(self) -> Dict[str, CategoryGroup]:
        """Available commands grouped by category key, sorted by name inside each group."""
        grouped: Dict[str, CategoryGroup] = {}
        for command in self._registry.get_all():
            key = command.category or GENERAL
            grouped.setdefault(key, CategoryGroup(info=self.info(key))).commands.append(command)
        for group in grouped.values():
            group.commands = sort_by_name(group.commands)
        return grouped

    def ordered_categories(self) -> List[str]:
        """Configured category keys, by priority, that currently hold commands."""
        grouped = self.group()
        return [k for k in self.category_order() if k in grouped]

    def search_in_category(self, category: str, query: str) -> List[Command]:
        if not self.is_valid(category):
            return []
        if not query or not query.strip():
            return self._registry.get_by_category(category)
        return [c for c in self._registry.search(query) if (c.category or GENERAL) == category]

    def filter_by_categories(self, categories: Iterable[str]) -> List[Command]:
        wanted = set(categories)
        if not wanted:
            return []
        return [c for c in self._registry.get_all() if (c.category or GENERAL) in wanted]

    def stats(self) -> Dict[str, object]:
        grouped = self.group()
        counts = {k: len(g.commands) for k, g in grouped.items()}
        return {
            "total_categories": len(grouped),
            "total_commands": sum(counts.values()),
            "category_counts": counts,
        }
