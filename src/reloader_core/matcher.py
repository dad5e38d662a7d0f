"""Glob matching of changed file names against watch rules."""

import fnmatch
import logging
import re
from collections.abc import Iterable
from functools import lru_cache

from reloader_core.models import WatchRule

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def check_pattern(pattern: str) -> str:
    """Validate a glob and return it in the form fnmatch understands.

    fnmatch silently treats a lone '[' as a literal, which hides typos like
    '*.[ch' in a config file. It also only knows '[!...]' for negation, so
    a leading '^' inside a class is rewritten to '!'.

    Raises:
        ValueError: If a '[' has no closing ']'
    """
    chars = list(pattern)
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                chars[j] = "!"
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise ValueError(f"unterminated character class at offset {i}")
            i = j
        i += 1
    return "".join(chars)


def glob_match(pattern: str, base_name: str) -> bool:
    """Case-sensitive shell-style match of base_name against pattern.

    Raises:
        ValueError: If the pattern is malformed
    """
    return fnmatch.fnmatchcase(base_name, check_pattern(pattern))


class RuleMatcher:
    """Finds the rules whose pattern matches a file's base name."""

    def __init__(self, rules: Iterable[WatchRule]):
        self.rules = tuple(rules)

    def match(self, base_name: str) -> list[WatchRule]:
        """Return matching rules in config order.

        A malformed pattern is logged and skipped; other rules are still
        evaluated.
        """
        matched = []
        for rule in self.rules:
            try:
                if glob_match(rule.pattern, base_name):
                    matched.append(rule)
            except (ValueError, re.error) as e:
                logger.error(f"[error] [{base_name}] {e} for pattern `{rule.pattern}`")
        return matched
