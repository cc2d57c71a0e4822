"""In-process reference of the completion logic embedded in emitted scripts.

The Bash and PowerShell scripts each carry their own copy of the matcher,
written in the shell's language. This module is the Python rendition of the
same algorithm; the test suite checks both emitted copies against it.

Matching runs four tiers and stops at the first one that yields candidates:

0. scale guard: too many candidates -> case-sensitive prefix matches only
1. case-sensitive prefix
2. case-insensitive prefix
3. fuzzy score (subsequence scan, cached), when enabled and the pattern is long enough
4. case-insensitive substring
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..commands.models import ValueKind
from .models import ROOT_CONTEXT, FuzzyConfig

if TYPE_CHECKING:
    from .models import CommandModel

__all__ = ["FuzzyMatcher", "complete", "fuzzy_score", "list_paths", "resolve_context"]

PERFECT_SCORE = 100
MATCH_WEIGHT = 60
CONSECUTIVE_WEIGHT = 20
START_BONUS = 20
MAX_LENGTH_PENALTY = 10


def fuzzy_score(pattern: str, candidate: str) -> int:
    """Score how well `pattern` approximately matches `candidate`.

    Args:
        pattern: What the user typed
        candidate: A completion candidate

    Returns:
        An integer between 0 and 100
    """
    pattern_len = len(pattern)
    candidate_len = len(candidate)
    if pattern_len == 0:
        return PERFECT_SCORE
    if candidate_len < pattern_len:
        return 0

    pattern_lower = pattern.lower()
    candidate_lower = candidate.lower()
    if candidate_lower.startswith(pattern_lower):
        return PERFECT_SCORE

    # every pattern character must exist somewhere in the candidate
    for char in pattern_lower:
        if char not in candidate_lower:
            return 0

    start_bonus = START_BONUS if candidate_lower.startswith(pattern_lower) else 0
    matched = 0
    consecutive = 0
    max_consecutive = 0
    position = 0
    for char in pattern_lower:
        found = candidate_lower.find(char, position)
        if found < 0:
            consecutive = 0
            continue
        matched += 1
        consecutive = consecutive + 1 if found == position else 1
        max_consecutive = max(max_consecutive, consecutive)
        position = found + 1

    score = (
        (matched * MATCH_WEIGHT) // pattern_len
        + (max_consecutive * CONSECUTIVE_WEIGHT) // pattern_len
        + start_bonus
        - min(candidate_len - pattern_len, MAX_LENGTH_PENALTY)
    )
    return max(0, min(PERFECT_SCORE, score))


class FuzzyMatcher:
    """Tiered candidate matcher with a bounded score cache."""

    def __init__(self, config: FuzzyConfig | None = None) -> None:
        self.config = config or FuzzyConfig()
        self.cache: dict[str, int] = {}

    def cached_score(self, pattern: str, candidate: str) -> int:
        """Return fuzzy_score(pattern, candidate), memoized by "pattern|candidate".

        Once the cache holds more than `cache_max_size` entries, it is
        emptied before the next insertion.
        """
        key = f"{pattern}|{candidate}"
        if key in self.cache:
            return self.cache[key]
        score = fuzzy_score(pattern, candidate)
        if len(self.cache) > self.config.cache_max_size:
            self.cache.clear()
        self.cache[key] = score
        return score

    def match(self, pattern: str, candidates: Sequence[str]) -> list[str]:
        """Filter and rank candidates for the typed pattern.

        Args:
            pattern: The partial word being completed
            candidates: Flag names, subcommand names or enum values

        Returns:
            The matching candidates, best first
        """
        config = self.config
        exact = [c for c in candidates if c.startswith(pattern)]
        if len(candidates) > config.max_candidates or exact:
            return exact

        pattern_lower = pattern.lower()
        insensitive = [c for c in candidates if c.lower().startswith(pattern_lower)]
        if insensitive:
            return insensitive

        if config.enabled and len(pattern) >= config.min_pattern_length:
            scored: list[tuple[int, str]] = []
            for candidate in candidates:
                score = self.cached_score(pattern, candidate)
                if score >= config.score_threshold:
                    scored.append((score, candidate))
            if scored:
                # sorted() is stable: equal scores keep their candidate order
                ranked = sorted(scored, key=lambda item: item[0], reverse=True)
                return [candidate for _, candidate in ranked[: config.max_results]]

        return [c for c in candidates if pattern_lower in c.lower()]


def resolve_context(tokens: Sequence[str], contexts: Mapping[str, object]) -> str:
    """Find the command context designated by already typed words.

    Args:
        tokens: The command line words, program name first, without the word being completed
        contexts: Known context paths

    Returns:
        The deepest context path reached, "/" at least
    """
    context = ROOT_CONTEXT
    for token in tokens[1:]:
        if token.startswith("-"):
            break
        candidate = f"{context}{token}/"
        if candidate not in contexts:
            break
        context = candidate
    return context


def list_paths(word: str) -> list[str]:
    """List filesystem entries starting with `word`, directories suffixed with "/".

    Hidden entries are listed only when the typed name starts with a dot.
    Unreadable directories yield an empty list.
    """
    head, sep, name = word.rpartition("/")
    base = Path(head + sep) if sep else Path()
    prefix = head + sep
    try:
        entries = sorted(base.iterdir(), key=lambda p: p.name)
    except OSError:
        return []
    results: list[str] = []
    for entry in entries:
        if not entry.name.startswith(name) or (entry.name.startswith(".") and not name.startswith(".")):
            continue
        suffix = "/" if entry.is_dir() else ""
        results.append(f"{prefix}{entry.name}{suffix}")
    return results


def complete(
    model: CommandModel,
    words: Sequence[str],
    matcher: FuzzyMatcher | None = None,
    paths: Callable[[str], list[str]] = list_paths,
) -> list[str]:
    """Compute the candidates an emitted script offers for a command line.

    Args:
        model: The collected command model
        words: Command line words, program name first; the last word is the one being completed
        matcher: Matcher to use (keeps its cache between calls)
        paths: Filesystem lister used for string-valued flags

    Returns:
        The completion candidates
    """
    matcher = matcher or FuzzyMatcher()
    if not words:
        return []
    current = words[-1]
    typed = words[:-1]
    context = resolve_context(typed, model.contexts)

    if len(typed) > 1:
        param = model.flag_index().get(f"{context}|{typed[-1]}")
        if param is not None:
            if param.value_kind is ValueKind.ENUM:
                return matcher.match(current, param.enum_options)
            if param.value_kind is ValueKind.STRING:
                return paths(current)

    return matcher.match(current, model.contexts.get(context, []))
