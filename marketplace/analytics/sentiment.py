"""
Review Sentiment

Keyword heuristic that buckets free-text review content into positive,
negative or neutral. Matching is case-insensitive substring containment and
the positive list is checked first, so text matching both lists is positive.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class Sentiment(str, Enum):
    """Sentiment bucket"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


POSITIVE_WORDS = ("good", "great", "excellent", "happy")
NEGATIVE_WORDS = ("bad", "poor", "unhappy", "terrible")


def classify(text: str) -> Sentiment:
    """Classify one piece of text."""
    lowered = (text or "").lower()
    if any(word in lowered for word in POSITIVE_WORDS):
        return Sentiment.POSITIVE
    if any(word in lowered for word in NEGATIVE_WORDS):
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


@dataclass(frozen=True)
class SentimentBreakdown:
    """Bucket counts over a set of texts"""
    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral


def breakdown(texts: Iterable[str]) -> SentimentBreakdown:
    """Count sentiment buckets; the counts always sum to the number of texts."""
    counts = Counter(classify(text) for text in texts)
    return SentimentBreakdown(
        positive=counts[Sentiment.POSITIVE],
        negative=counts[Sentiment.NEGATIVE],
        neutral=counts[Sentiment.NEUTRAL],
    )
