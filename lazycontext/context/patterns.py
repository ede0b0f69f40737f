"""Node-type pattern rules deciding which syntax nodes count as context.

Rules are ordered; default rules are always tried before a language's own
rules and the first match wins, so rule order is the tie-break users see.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import lru_cache

DEFAULT_LANGUAGE = "default"


def word_pattern(pattern: str) -> str:
    """Wrap ``pattern`` so it only matches at alphanumeric word frontiers.

    Underscores are not word characters here: ``function`` matches both
    ``function_definition`` and ``arrow_function`` but not ``functions``.
    """
    return f"(?<![0-9A-Za-z]){pattern}(?![0-9A-Za-z])"


@dataclass(frozen=True)
class PatternRule:
    """One match rule; ``source`` doubles as the tag reported on a match."""

    source: str
    language: str = DEFAULT_LANGUAGE
    exact: bool = False
    regex: re.Pattern[str] | None = field(default=None, compare=False, repr=False)

    @classmethod
    def compile(cls, source: str, language: str = DEFAULT_LANGUAGE, exact: bool = False) -> PatternRule:
        if exact:
            return cls(source=source, language=language, exact=True, regex=None)
        try:
            regex = re.compile(word_pattern(source))
        except re.error:
            # An unusable pattern is inert rather than fatal.
            regex = re.compile(word_pattern(re.escape(source)))
        return cls(source=source, language=language, exact=False, regex=regex)

    def matches(self, node_type: str) -> bool:
        if self.exact:
            return node_type == self.source
        assert self.regex is not None
        return self.regex.search(node_type) is not None


@dataclass(frozen=True)
class PatternSet:
    """Default rules plus per-language rules, in evaluation order."""

    default: tuple[PatternRule, ...] = ()
    languages: tuple[tuple[str, tuple[PatternRule, ...]], ...] = ()

    def rules_for(self, language: str | None) -> tuple[PatternRule, ...]:
        if language is None:
            return ()
        for name, rules in self.languages:
            if name == language:
                return rules
        return ()

    @classmethod
    def build(
        cls,
        patterns: Mapping[str, Sequence[str]],
        exact_patterns: Mapping[str, bool] | None = None,
    ) -> PatternSet:
        """Compile a ``language -> [pattern, ...]`` mapping.

        Languages flagged in ``exact_patterns`` compare node types by equality
        instead of whole-word search; the ``"default"`` key may be flagged too.
        """
        exact_patterns = exact_patterns or {}
        default: tuple[PatternRule, ...] = ()
        languages: list[tuple[str, tuple[PatternRule, ...]]] = []
        for language, sources in patterns.items():
            exact = bool(exact_patterns.get(language, False))
            rules = tuple(PatternRule.compile(source, language, exact) for source in sources)
            if language == DEFAULT_LANGUAGE:
                default = rules
            else:
                languages.append((language, rules))
        return cls(default=default, languages=tuple(languages))


def _first_match(node_type: str, rules: Sequence[PatternRule]) -> PatternRule | None:
    for rule in rules:
        if rule.matches(node_type):
            return rule
    return None


@lru_cache(maxsize=4096)
def is_context_node(node_type: str, language: str | None, patterns: PatternSet) -> tuple[bool, str | None]:
    """Return ``(matched, rule_tag)`` for a node type in ``language``."""
    rule = _first_match(node_type, patterns.default)
    if rule is None:
        rule = _first_match(node_type, patterns.rules_for(language))
    if rule is None:
        return False, None
    return True, rule.source


@lru_cache(maxsize=4096)
def type_key(node_type: str, patterns: PatternSet) -> str:
    """Return the first default rule matching ``node_type``, else the type itself."""
    rule = _first_match(node_type, patterns.default)
    return rule.source if rule is not None else node_type
