"""Theme providers: named sets of CSS classes used by generated markup"""

import logging
from dataclasses import dataclass


log = logging.getLogger(__name__)

DEFAULT_THEME = "default"


@dataclass(frozen=True)
class ThemeProvider:
    """Class names a theme supplies for markup the transforms generate."""
    name:              str
    tag_class:         str
    table_class:       str
    thead_row_class:   str
    th_class:          str
    row_class:         str
    td_class:          str
    message_class:     str     # error / empty-state text inside a base table wrapper
    placeholder_class: str     # loading box inside a base-embed placeholder


_REGISTRY: dict[str, ThemeProvider] = {}


def register_theme(provider: ThemeProvider) -> ThemeProvider:
    """Register provider under its name, replacing any previous entry."""
    _REGISTRY[provider.name] = provider
    return provider


def get_theme(name: str | None = None) -> ThemeProvider:
    """Look up a theme by name, falling back to the default theme."""
    if name and name in _REGISTRY:
        return _REGISTRY[name]
    if name:
        log.warning("Unknown theme %r, using %r", name, DEFAULT_THEME)
    return _REGISTRY[DEFAULT_THEME]


def available_themes() -> list[str]:
    return sorted(_REGISTRY)


register_theme(ThemeProvider(
    name=DEFAULT_THEME,
    tag_class=(
        "text-xs text-primary-600 dark:text-primary-300 bg-primary-100 dark:bg-primary-800 "
        "px-2.5 py-1 rounded-full border border-primary-200 dark:border-primary-700 "
        "transition-colors hover:bg-highlight-100 dark:hover:bg-highlight-800"
    ),
    table_class="w-full text-left border-collapse",
    thead_row_class="border-b border-primary-200 dark:border-primary-600",
    th_class="py-2 pr-4 text-primary-600 dark:text-primary-300 whitespace-nowrap",
    row_class="border-b border-primary-200/60 dark:border-primary-600/60 last:border-0",
    td_class="py-2 pr-4 text-primary-900 dark:text-primary-100 whitespace-nowrap",
    message_class="py-3 px-4 text-sm text-primary-600 dark:text-primary-300",
    placeholder_class=(
        "rounded-lg border border-primary-200 dark:border-primary-600 p-4 bg-primary-50 "
        "dark:bg-primary-800 text-primary-600 dark:text-primary-300"
    ),
))

register_theme(ThemeProvider(
    name="minimal",
    tag_class="tag-pill",
    table_class="base-table",
    thead_row_class="base-table-head",
    th_class="base-table-th",
    row_class="base-table-row",
    td_class="base-table-td",
    message_class="base-table-message",
    placeholder_class="base-embed-loading",
))
