"""Context configuration: defaults, user overrides, and the JSON config file.

All access is defensive: a missing or malformed config file and values of the
wrong type fall back to defaults instead of raising.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir

from .context.patterns import DEFAULT_LANGUAGE, PatternSet
from .context.reducer import DEFAULT_SKIP_LEADING_TYPES, DEFAULT_TERMINAL_TYPES

APP_NAME = "lazycontext"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_TYPE_PATTERNS: dict[str, tuple[str, ...]] = {
    # Word matches cover whole node families, e.g. function_definition and arrow_function.
    DEFAULT_LANGUAGE: (
        "class",
        "function",
        "method",
        "for",
        "while",
        "if",
        "switch",
        "case",
    ),
    "rust": ("impl_item",),
    "vhdl": (
        "process_statement",
        "architecture_body",
        "entity_declaration",
    ),
}

THROTTLE_DELAY_SECONDS = 0.1


@dataclass(frozen=True)
class ContextConfig:
    """Resolved settings for one context session."""

    enable: bool = True
    throttle: bool = False
    max_lines: int = 0
    patterns: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_TYPE_PATTERNS))
    exact_patterns: Mapping[str, bool] = field(default_factory=dict)
    terminal_types: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _merge_type_table(DEFAULT_TERMINAL_TYPES, None)
    )
    skip_leading_types: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _merge_type_table(DEFAULT_SKIP_LEADING_TYPES, None)
    )

    @property
    def pattern_set(self) -> PatternSet:
        return _compile_patterns(
            tuple((language, tuple(sources)) for language, sources in self.patterns.items()),
            tuple(sorted(self.exact_patterns.items())),
        )


@lru_cache(maxsize=64)
def _compile_patterns(
    patterns: tuple[tuple[str, tuple[str, ...]], ...],
    exact_patterns: tuple[tuple[str, bool], ...],
) -> PatternSet:
    """Compile pattern tuples once; configs are immutable so results are shared."""
    return PatternSet.build(dict(patterns), dict(exact_patterns))


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_nonnegative_int(value: object, default: int) -> int:
    """Booleans and non-integers are treated as invalid."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return max(0, value)


def _merge_patterns(user_value: object) -> dict[str, tuple[str, ...]]:
    """Overlay user pattern lists on the defaults; a user list replaces that language's list."""
    merged = dict(DEFAULT_TYPE_PATTERNS)
    if not isinstance(user_value, Mapping):
        return merged
    for language, sources in user_value.items():
        if not isinstance(language, str) or not isinstance(sources, (list, tuple)):
            continue
        merged[language] = tuple(source for source in sources if isinstance(source, str) and source)
    return merged


def _merge_exact(user_value: object) -> dict[str, bool]:
    if not isinstance(user_value, Mapping):
        return {}
    return {
        language: flag
        for language, flag in user_value.items()
        if isinstance(language, str) and isinstance(flag, bool)
    }


def _merge_type_table(
    defaults: Mapping[str, Mapping[str, str]],
    user_value: object,
) -> dict[str, dict[str, str]]:
    """Deep-merge a ``type key -> language -> node type`` table."""
    merged = {key: dict(languages) for key, languages in defaults.items()}
    if not isinstance(user_value, Mapping):
        return merged
    for key, languages in user_value.items():
        if not isinstance(key, str) or not isinstance(languages, Mapping):
            continue
        table = merged.setdefault(key, {})
        for language, node_type in languages.items():
            if isinstance(language, str) and isinstance(node_type, str):
                table[language] = node_type
    return merged


def build_config(options: Mapping[str, object] | None = None) -> ContextConfig:
    """Resolve user ``options`` over the defaults."""
    options = options or {}
    return ContextConfig(
        enable=_coerce_bool(options.get("enable"), True),
        throttle=_coerce_bool(options.get("throttle"), False),
        max_lines=_coerce_nonnegative_int(options.get("max_lines"), 0),
        patterns=_merge_patterns(options.get("patterns")),
        exact_patterns=_merge_exact(options.get("exact_patterns")),
        terminal_types=_merge_type_table(DEFAULT_TERMINAL_TYPES, options.get("terminal_types")),
        skip_leading_types=_merge_type_table(DEFAULT_SKIP_LEADING_TYPES, options.get("skip_leading_types")),
    )


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def load_context_config(overrides: Mapping[str, object] | None = None) -> ContextConfig:
    """Build the effective config from the config file plus ``overrides``."""
    options = load_config()
    if overrides:
        options.update(overrides)
    return build_config(options)
