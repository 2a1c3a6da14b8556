"""Letter-pair (Dice coefficient) similarity between two texts."""

from __future__ import annotations

from collections import Counter


def letter_pairs(text: str) -> list[str]:
    """Overlapping 2-character substrings of ``text``, duplicates kept.

    Texts shorter than two characters have no pairs.
    """
    return [text[i : i + 2] for i in range(len(text) - 1)]


def letter_pair_similarity(a: str, b: str) -> float:
    """Similarity of two normalized texts: 1.0 means identical, 0.0 nothing shared.

    Computes ``2 * |A & B| / (|A| + |B|)`` over the letter-pair multisets of
    both texts. A pair shared between the texts counts at most as often as
    its smaller multiplicity, so repeated pairs on one side cannot be
    matched twice against a single occurrence on the other.

    Tolerates reordering of large chunks (moved methods keep their pairs),
    which an edit distance would not, and stays linear in text length.

    When neither text has any pairs (both shorter than two characters)
    the score is 1.0 if the texts are equal, otherwise 0.0. Two empty
    strings are therefore identical.

    Args:
        a: First normalized text.
        b: Second normalized text.

    Returns:
        Symmetric score in ``[0.0, 1.0]``.
    """
    pairs_a = Counter(letter_pairs(a))
    pairs_b = Counter(letter_pairs(b))
    total = pairs_a.total() + pairs_b.total()
    if total == 0:
        return 1.0 if a == b else 0.0

    shared = (pairs_a & pairs_b).total()
    return 2.0 * shared / total
