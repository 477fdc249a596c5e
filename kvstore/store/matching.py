"""
Key Matching Module

Pure string helpers used to order keys and to find the stored key nearest
to a query:

- compare(): lexicographic ordering that also reports where two strings differ
- chardist(): absolute distance between two character codes
- distance(): Levenshtein edit distance
- closest_key(): nearest-candidate scan with a multi-stage tie-break

None of these functions keep state, so they can be tested independently of
the store.
"""

import functools
import math
from typing import Iterable, List, Optional, Sequence


def compare(lhs: Optional[str], rhs: Optional[str]) -> int:
    """
    Compare two strings character by character.

    Args:
        lhs: Left operand (None sorts before any string)
        rhs: Right operand

    Returns:
        0 if both strings are equal. Otherwise the 1-indexed position of the
        first differing character, negative if lhs sorts before rhs. When one
        string is a prefix of the other, the magnitude is the length of the
        shorter one.

    Examples:
        >>> compare("head", "heap")
        -4
        >>> compare("def", "abc")
        1
        >>> compare("one", "one")
        0
    """
    if lhs is None and rhs is None:
        return 0
    if lhs is None:
        return -1
    if rhs is None:
        return 1

    for i, (a, b) in enumerate(zip(lhs, rhs)):
        if a < b:
            return -(i + 1)
        if a > b:
            return i + 1

    if len(lhs) < len(rhs):
        return -len(lhs)
    if len(lhs) > len(rhs):
        return len(rhs)
    return 0


def chardist(lhs: str, rhs: str) -> int:
    """Absolute difference between the character codes of lhs and rhs."""
    return abs(ord(rhs) - ord(lhs))


def distance(lhs: Optional[str], rhs: Optional[str], penalize_substitution: bool = False) -> int:
    """
    Compute the Levenshtein distance between two strings.

    Insertions and deletions cost 1. A substitution costs 1, or 2 when
    penalize_substitution is set. The result is 0 iff both strings are
    equal and the function is symmetric in its arguments.

    Uses two rolling rows sized by the shorter string, so auxiliary space is
    O(min(len(lhs), len(rhs))).

    Args:
        lhs: First string (None is treated as empty)
        rhs: Second string (None is treated as empty)
        penalize_substitution: Charge 2 instead of 1 for a substitution

    Returns:
        The edit distance

    Examples:
        >>> distance("hello", "world")
        4
        >>> distance("ab", "abc")
        1
    """
    lhs = lhs or ""
    rhs = rhs or ""

    if not lhs:
        return len(rhs)
    if not rhs:
        return len(lhs)

    # Iterate over the longer string, keep rows as long as the shorter one
    if len(rhs) > len(lhs):
        lhs, rhs = rhs, lhs

    substitution_cost = 2 if penalize_substitution else 1
    previous = list(range(len(rhs) + 1))

    for i, a in enumerate(lhs):
        current = [i + 1] + [0] * len(rhs)
        for j, b in enumerate(rhs):
            deletion = previous[j + 1] + 1
            insertion = current[j] + 1
            substitution = previous[j] + (0 if a == b else substitution_cost)
            current[j + 1] = min(deletion, insertion, substitution)
        previous = current

    return previous[len(rhs)]


def sort_keys(keys: Iterable[str]) -> List[str]:
    """Sort keys by the ordering defined by compare()."""
    return sorted(keys, key=functools.cmp_to_key(compare))


def closest_key(
        query: str,
        candidates: Sequence[str],
        penalize_substitution: bool = False,
) -> Optional[str]:
    """
    Pick the candidate nearest to query.

    Candidates are scanned in order. A candidate becomes the best one when:

    1. its edit distance is below the smallest seen so far, or
    2. it ties that distance and its length is closer to the query's
       length than any seen so far, or
    3. it ties both and the character code at the first differing position
       is closer to the query's character there than any seen so far.

    The running minima of each stage are kept for the whole scan and are
    not reset when an earlier stage improves. Remaining ties keep the
    candidate found first.

    Args:
        query: The string to match (must not be empty)
        candidates: Keys to scan, usually from sort_keys()
        penalize_substitution: Passed through to distance()

    Returns:
        The best candidate, or None if there are no candidates
    """
    candidates = [candidate for candidate in candidates if candidate]
    if not query or not candidates:
        return None

    best = 0
    min_dist = min_len_dist = min_char_dist = math.inf

    for index, candidate in enumerate(candidates):
        dist = distance(query, candidate, penalize_substitution)
        if dist < min_dist:
            min_dist = dist
            best = index
        if dist > min_dist:
            continue

        len_dist = abs(len(candidate) - len(query))
        if len_dist < min_len_dist:
            min_len_dist = len_dist
            best = index
        if len_dist > min_len_dist:
            continue

        position = abs(compare(query, candidate))
        offset = position - 1 if position > 0 else 0
        char_dist = chardist(query[offset], candidate[offset])
        if char_dist < min_char_dist:
            min_char_dist = char_dist
            best = index

    return candidates[best]
