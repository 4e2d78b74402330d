"""
Rule-based translation of free-text search strings into filter expressions.

The translator runs four fixed stages:

1. price extraction: the first matching price rule wins
2. keyword extraction: every brand and category synonym contained in the query
3. word fallback: plain words outside the price phrase, only when stage 2 found nothing
4. combination: AND(price, OR(text)) or whichever half is present

Rule tables are static data and the translator holds no mutable state, so a
single instance can serve concurrent requests.
"""

import logging
import re
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Callable, Iterable, List, Optional, Tuple

from docsearch.models.filters import (
    And,
    FilterExpression,
    FilterNode,
    Or,
    RangeCondition,
    RangeOp,
    TextMatch,
)

logger = logging.getLogger(__name__)

PRICE_FIELD = "price"
TEXT_FIELDS: Tuple[str, ...] = ("title", "description")

BRAND_KEYWORDS: Tuple[str, ...] = (
    "apple",
    "samsung",
    "sony",
    "nintendo",
    "microsoft",
    "dell",
    "hp",
    "lenovo",
)

CATEGORY_KEYWORDS = MappingProxyType({
    "phone": ("phone", "iphone", "smartphone"),
    "laptop": ("laptop", "notebook", "macbook"),
    "gaming": ("gaming", "console", "nintendo", "playstation", "xbox"),
    "audio": ("headphones", "speaker", "audio", "sound"),
    "camera": ("camera", "photo", "video"),
})

STOPWORDS = frozenset({
    "under", "over", "above", "below", "between",
    "and", "the", "a", "an", "is", "are",
})

MIN_WORD_LENGTH = 3

# at most 18 digits, so every price fits a BSON int64; longer numbers are not prices
_AMOUNT = r"\$?(\d{1,18})(?!\d)"

_PUNCTUATION = re.compile(r"[^\w\s]")


def text_pair(substring: str) -> Tuple[TextMatch, ...]:
    return tuple(TextMatch(field=f, substring=substring) for f in TEXT_FIELDS)


class PatternRule(ABC):
    """A named rule: `match` inspects the lower-cased query, `build` turns a hit into filter nodes."""

    name: str

    @abstractmethod
    def match(self, query: str) -> Optional[Any]:
        ...

    @abstractmethod
    def build(self, match: Any) -> Tuple[FilterNode, ...]:
        ...

    def consume(self, query: str, match: Any) -> str:
        """Query text left for the word fallback once this rule has matched."""
        return query


class PriceRule(PatternRule):
    def __init__(self, name: str, pattern: str, builder: Callable[[re.Match], FilterNode]):
        self.name = name
        self._regex = re.compile(pattern)
        self._builder = builder

    def match(self, query: str) -> Optional[re.Match]:
        return self._regex.search(query)

    def build(self, match: re.Match) -> Tuple[FilterNode, ...]:
        return (self._builder(match),)

    def consume(self, query: str, match: re.Match) -> str:
        return query[:match.start()] + " " + query[match.end():]


class KeywordRule(PatternRule):
    def __init__(self, name: str, token: str):
        self.name = name
        self.token = token

    def match(self, query: str) -> Optional[str]:
        return self.token if self.token in query else None

    def build(self, match: str) -> Tuple[FilterNode, ...]:
        return text_pair(match)


def _price(op: RangeOp, value: str) -> RangeCondition:
    return RangeCondition(field=PRICE_FIELD, op=op, value=int(value))


PRICE_RULES: Tuple[PriceRule, ...] = (
    PriceRule(
        "between",
        r"between\s+" + _AMOUNT + r"\s+and\s+" + _AMOUNT,
        lambda m: And(children=(_price(RangeOp.GTE, m.group(1)), _price(RangeOp.LTE, m.group(2)))),
    ),
    PriceRule(
        "under",
        r"(?:under|below|less than)\s+" + _AMOUNT,
        lambda m: _price(RangeOp.LT, m.group(1)),
    ),
    PriceRule(
        "over",
        r"(?:over|above|more than)\s+" + _AMOUNT,
        lambda m: _price(RangeOp.GT, m.group(1)),
    ),
)

KEYWORD_RULES: Tuple[KeywordRule, ...] = tuple(
    [KeywordRule(f"brand: {b}", b) for b in BRAND_KEYWORDS]
    + [
        KeywordRule(f"category: {category} ({kw})", kw)
        for category, keywords in CATEGORY_KEYWORDS.items()
        for kw in keywords
    ]
)


class QueryTranslator:
    def __init__(
        self,
        price_rules: Iterable[PatternRule] = PRICE_RULES,
        keyword_rules: Iterable[PatternRule] = KEYWORD_RULES,
        stopwords: Iterable[str] = STOPWORDS,
    ):
        self.price_rules = tuple(price_rules)
        self.keyword_rules = tuple(keyword_rules)
        self.stopwords = frozenset(stopwords)

    def translate(self, query: Optional[str]) -> FilterExpression:
        text = (query or "").lower()
        logger.info("Converting natural language query: %r", text)

        price, remainder = self._extract_price(text)
        conditions = self._extract_keywords(text)
        if not conditions:
            logger.info("No specific keywords found, performing general word search")
            conditions = self._extract_words(remainder)

        if price is not None and conditions:
            logger.info("Combining price and text conditions with AND")
            node: Optional[FilterNode] = And(children=(price, Or(children=tuple(conditions))))
        elif price is not None:
            logger.info("Using price condition only")
            node = price
        elif conditions:
            logger.info("Using text conditions only with OR")
            node = Or(children=tuple(conditions))
        else:
            logger.warning("No patterns matched; query will match all documents")
            node = None

        return FilterExpression(node=node)

    def _extract_price(self, text: str) -> Tuple[Optional[FilterNode], str]:
        for rule in self.price_rules:
            m = rule.match(text)
            if m is None:
                continue
            nodes = rule.build(m)
            logger.info("Found price filter: %s", rule.name)
            node = nodes[0] if len(nodes) == 1 else And(children=nodes)
            return node, rule.consume(text, m)
        return None, text

    def _extract_keywords(self, text: str) -> List[FilterNode]:
        out: List[FilterNode] = []
        found: List[str] = []
        for rule in self.keyword_rules:
            m = rule.match(text)
            if m is None:
                continue
            found.append(rule.name)
            out.extend(rule.build(m))
        if found:
            logger.info("Found keywords: %s", ", ".join(found))
        return out

    def _extract_words(self, text: str) -> List[FilterNode]:
        words = [
            w for w in _PUNCTUATION.sub("", text).split()
            if w not in self.stopwords and len(w) >= MIN_WORD_LENGTH
        ]
        logger.info("Extracted words for search: %s", ", ".join(words))
        out: List[FilterNode] = []
        for w in words:
            out.extend(text_pair(w))
        return out


default_translator = QueryTranslator()


def translate(query: Optional[str]) -> FilterExpression:
    return default_translator.translate(query)
