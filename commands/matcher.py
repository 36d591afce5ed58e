"""
Query Matcher
-------------
Scores and ranks available commands against free-text input.

Scoring tiers (case-insensitive, best tier wins, tiers never add up):
    title equals query          100
    title starts with query      80
    title contains query         60
    keyword equals query         50
    keyword contains query       30
    fuzzy subsequence in title   (0, 10]

Ties keep registration order. The matcher is pure: the same registry
state and query always produce the same ordered result.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
import logging

from .model import Command, CommandCategory, is_available
from .registry import CommandRegistry


class MatchKind(str, Enum):
    """Which rule produced a result's score."""
    ALL = "all"                  # Empty query, no scoring
    TITLE_EXACT = "title_exact"
    TITLE_PREFIX = "title_prefix"
    TITLE_SUBSTRING = "title_substring"
    KEYWORD_EXACT = "keyword_exact"
    KEYWORD_SUBSTRING = "keyword_substring"
    FUZZY = "fuzzy"


SCORES = {
    MatchKind.TITLE_EXACT: 100.0,
    MatchKind.TITLE_PREFIX: 80.0,
    MatchKind.TITLE_SUBSTRING: 60.0,
    MatchKind.KEYWORD_EXACT: 50.0,
    MatchKind.KEYWORD_SUBSTRING: 30.0,
}

FUZZY_MAX_SCORE = 10.0


@dataclass(frozen=True)
class SearchResult:
    """A command paired with its relevance for one query."""
    command: Command
    score: float
    match_kind: MatchKind
    matched_keywords: Tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"SearchResult({self.command.id}, score={self.score:.2f})"


@dataclass(frozen=True)
class CommandGroup:
    """Results of one category (None for an ungrouped block), for display."""
    category: Optional[CommandCategory]
    results: Tuple[SearchResult, ...]

    @property
    def commands(self) -> List[Command]:
        return [r.command for r in self.results]


def fuzzy_score(query: str, text: str) -> Optional[float]:
    """
    Score `query` as an ordered subsequence of `text`.

    Returns None when some character of the query cannot be matched in
    order. Contiguous runs score higher than scattered matches.
    """
    if not query:
        return None

    position = 0
    last_match = -1
    gaps = 0
    for ch in query:
        found = text.find(ch, position)
        if found == -1:
            return None
        if last_match != -1 and found - last_match > 1:
            gaps += 1
        last_match = found
        position = found + 1

    return FUZZY_MAX_SCORE / (1 + gaps)


def score_command(command: Command, query: str) -> Optional[SearchResult]:
    """Score one command against a lower-cased, stripped query."""
    title = command.title.lower()

    if title == query:
        kind = MatchKind.TITLE_EXACT
    elif title.startswith(query):
        kind = MatchKind.TITLE_PREFIX
    elif query in title:
        kind = MatchKind.TITLE_SUBSTRING
    else:
        kind = None

    matched_keywords = tuple(kw for kw in command.keywords if query in kw.lower())

    if kind is None and matched_keywords:
        if any(kw.lower() == query for kw in matched_keywords):
            kind = MatchKind.KEYWORD_EXACT
        else:
            kind = MatchKind.KEYWORD_SUBSTRING

    if kind is not None:
        return SearchResult(command, SCORES[kind], kind, matched_keywords)

    fuzzy = fuzzy_score(query, title)
    if fuzzy is None:
        return None
    return SearchResult(command, fuzzy, MatchKind.FUZZY)


class QueryMatcher:
    """
    Ranks the registry's available commands for a query.

    Unavailable commands never appear, not even for the empty query.
    """

    def __init__(self, registry: CommandRegistry, max_results: Optional[int] = None):
        self._registry = registry
        self._max_results = max_results
        self._logger = logging.getLogger("palette.commands.matcher")

    def available_commands(self) -> List[Command]:
        """Commands whose predicate is true or absent, in registration order."""
        return [c for c in self._registry.get_all() if is_available(c, self._logger)]

    def search(self, query_text: str, limit: Optional[int] = None) -> List[SearchResult]:
        """
        Search commands.

        Args:
            query_text: Raw user input; whitespace-only behaves as empty
            limit: Max results (defaults to the matcher's max_results)

        Returns:
            Results sorted by descending score, ties in registration order.
            For an empty query: every available command grouped by category.
        """
        limit = limit if limit is not None else self._max_results
        commands = self.available_commands()
        query = (query_text or "").strip().lower()

        if not query:
            results = [SearchResult(c, 0.0, MatchKind.ALL) for c in commands]
            # sorted() is stable, so registration order survives within a category
            results = sorted(results, key=lambda r: r.command.category.order)
        else:
            results = []
            for command in commands:
                result = score_command(command, query)
                if result is not None:
                    results.append(result)
            results = sorted(results, key=lambda r: -r.score)

        if limit is not None:
            results = results[:limit]
        return results


def group_by_category(results: List[SearchResult]) -> List[CommandGroup]:
    """Group results by category in the fixed category order."""
    buckets = {}
    for result in results:
        buckets.setdefault(result.command.category, []).append(result)

    return [
        CommandGroup(category, tuple(buckets[category]))
        for category in CommandCategory
        if category in buckets
    ]
