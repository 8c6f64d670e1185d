"""
Text similarity strategies for partial-credit text answers.

A strategy takes the learner's answer and the acceptable answers, both
already normalized by the caller (trimmed, and lowercased unless the
question is case sensitive), and returns the best similarity in [0, 1].

- keyword_overlap: shared unique whitespace tokens over the acceptable
  answer's unique tokens. The default.
- fuzzy_similarity: containment and edit-distance heuristic used by the
  quiz app before keyword scoring was introduced.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from functools import partial

from rapidfuzz.distance import Levenshtein

SimilarityStrategy = Callable[[str, Sequence[str]], float]


def keyword_overlap(answer: str, accepted: Sequence[str]) -> float:
    """
    Keyword overlap against the best-matching acceptable answer.

    similarity = |tokens(answer) & tokens(accepted)| / |tokens(accepted)|
    """
    answer_tokens = set(answer.split())
    best = 0.0
    for candidate in accepted:
        if answer == candidate:
            return 1.0
        candidate_tokens = set(candidate.split())
        if not candidate_tokens:
            continue
        best = max(best, len(answer_tokens & candidate_tokens) / len(candidate_tokens))
    return best


def fuzzy_similarity(answer: str, accepted: Sequence[str], threshold: float = 0.7) -> float:
    """
    Containment and edit-distance similarity.

    Exact match scores 1.0, an answer containing an acceptable answer 0.9,
    an answer contained in one 0.8. Otherwise the edit-distance ratio counts
    only above `threshold`, discounted to 80%.
    """
    best = 0.0
    for candidate in accepted:
        if answer == candidate:
            return 1.0
        if not answer or not candidate:
            continue
        if candidate in answer:
            best = max(best, 0.9)
            continue
        if answer in candidate:
            best = max(best, 0.8)
            continue
        ratio = Levenshtein.normalized_similarity(answer, candidate)
        if ratio > threshold:
            best = max(best, ratio * 0.8)
    return best


STRATEGIES: dict[str, SimilarityStrategy] = {
    "keyword": keyword_overlap,
    "fuzzy": fuzzy_similarity,
}


def get_strategy(name: str, fuzzy_threshold: float = 0.7) -> SimilarityStrategy:
    """
    Resolve a configured strategy name.

    Raises:
        ValueError: unknown strategy name
    """
    key = name.strip().lower()
    if key not in STRATEGIES:
        raise ValueError(
            f"Unknown text similarity strategy {name!r}. "
            f"Choose one of: {', '.join(sorted(STRATEGIES))}"
        )
    if key == "fuzzy":
        return partial(fuzzy_similarity, threshold=fuzzy_threshold)
    return STRATEGIES[key]
