"""
Tests for Key Matching

These tests verify the pure matching helpers and KVStore.closest():
- compare(): ordering and first-difference position
- chardist(): character code distance
- distance(): Levenshtein edit distance and its metric properties
- closest_key() / KVStore.closest(): nearest key with tie-breaks

Run with: python -m pytest tests/test_matching.py -v
"""

import itertools

import pytest
from kvstore.store.matching import chardist, closest_key, compare, distance, sort_keys
from kvstore.store.store import KVStore


class TestCompare:
    """Test compare() function."""

    def test_first_character_differs(self):
        """Test the position is 1 when the first characters differ."""
        assert compare("abc", "def") == -1
        assert compare("def", "abc") == 1

    def test_equal(self):
        """Test equal strings compare as 0."""
        assert compare("one", "one") == 0
        assert compare("", "") == 0

    def test_none_operands(self):
        """Test None sorts before any string."""
        assert compare(None, None) == 0
        assert compare(None, "null") == -1
        assert compare("null", None) == 1

    def test_later_position(self):
        """Test the 1-indexed position of a later difference."""
        assert compare("head", "heap") == -4
        assert compare("hello", "help") == -4
        assert compare("hence", "head") == 3

    def test_prefix(self):
        """Test a prefix reports the length of the shorter string."""
        assert compare("he", "head") == -2
        assert compare("head", "he") == 2

    def test_sort_keys(self):
        """Test sort_keys orders by compare()."""
        assert sort_keys(["key", "hello", "head", "he"]) == ["he", "head", "hello", "key"]


class TestCharDist:
    """Test chardist() function."""

    def test_same_character(self):
        """Test identical characters are 0 apart."""
        assert chardist("a", "a") == 0

    def test_distance(self):
        """Test the absolute code difference."""
        assert chardist("a", "c") == 2
        assert chardist("z", "a") == 25

    def test_symmetric(self):
        """Test chardist is symmetric."""
        assert chardist("a", "c") == chardist("c", "a")


class TestDistance:
    """Test distance() function."""

    def test_empty_operand(self):
        """Test distance to an empty string is the other length."""
        assert distance(None, "hello world") == len("hello world")
        assert distance("Levenshtein", None) == len("Levenshtein")
        assert distance("", "abc") == 3
        assert distance(None, None) == 0

    def test_equality(self):
        """Test distance is 0 for equal strings."""
        assert distance("abc", "abc") == 0

    def test_upper_bound(self):
        """Test distance never exceeds the longer length."""
        assert distance("hello", "hello world") <= len("hello world")

    def test_deletion(self):
        """Test a single deletion."""
        assert distance("ab", "abc") == 1

    def test_insertion(self):
        """Test a single insertion."""
        assert distance("abc", "abcd") == 1

    def test_substitution(self):
        """Test a single substitution."""
        assert distance("abc", "bbc") == 1
        assert distance("abc", "abc ") == distance("abc", " abc")

    def test_classic_examples(self):
        """Test textbook distances."""
        assert distance("kitten", "sitting") == 3
        assert distance("flaw", "lawn") == 2
        assert distance("hello", "world") == 4

    def test_penalize_substitution(self):
        """Test substitutions cost 2 when penalized."""
        assert distance("abc", "bbc", penalize_substitution=True) == 2
        assert distance("hello", "world", penalize_substitution=True) <= 10
        assert distance("hello", "world", penalize_substitution=False) == 4
        assert distance("ab", "abc", penalize_substitution=True) == 1

    def test_commutative(self):
        """Test distance(a, b) == distance(b, a)."""
        words = ["", "a", "abc", "def", "kitten", "sitting", "heap", "hence"]
        for a, b in itertools.product(words, repeat=2):
            assert distance(a, b) == distance(b, a)
            assert distance(a, b, True) == distance(b, a, True)

    def test_triangle_inequality(self):
        """Test distance(a, c) <= distance(a, b) + distance(b, c)."""
        words = ["", "aaa", "aab", "aac", "head", "heap", "hello", "sunset"]
        for a, b, c in itertools.product(words, repeat=3):
            assert distance(a, c) <= distance(a, b) + distance(b, c)

    def test_zero_iff_equal(self):
        """Test distance is 0 only for identical strings."""
        words = ["", "a", "b", "ab", "ba"]
        for a, b in itertools.product(words, repeat=2):
            assert (distance(a, b) == 0) == (a == b)


class TestClosestKey:
    """Test closest_key() function."""

    def test_no_candidates(self):
        """Test no candidates yields None."""
        assert closest_key("query", []) is None

    def test_empty_query(self):
        """Test an empty query yields None."""
        assert closest_key("", ["a", "b"]) is None

    def test_minimum_distance_wins(self):
        """Test the smallest edit distance wins."""
        assert closest_key("cart", ["apple", "card", "zebra"]) == "card"

    def test_length_breaks_distance_tie(self):
        """Test the closer length wins among equal distances."""
        # both one edit away, "abcd" has the query's length
        assert closest_key("abce", ["abc", "abcd"]) == "abcd"

    def test_character_breaks_length_tie(self):
        """Test the closer differing character wins among equal lengths."""
        assert closest_key("hean", ["head", "heap"]) == "heap"
        assert closest_key("heae", ["head", "heap"]) == "head"

    def test_first_seen_wins_full_tie(self):
        """Test unresolved ties keep the earliest candidate."""
        assert closest_key("b", ["a", "c"]) == "a"
        assert closest_key("b", ["c", "a"]) == "c"


class TestKVStoreClosest:
    """Test KVStore.closest()."""

    def test_exact_match(self, populated_store: KVStore):
        """Test stored keys match themselves."""
        for key in populated_store.keys():
            assert populated_store.closest(key) == key

    def test_nearest_keys(self, populated_store: KVStore):
        """Scenario: nearest keys among hello, head and heap."""
        assert populated_store.closest("hence") == "hello"
        assert populated_store.closest("heae") == "head"
        assert populated_store.closest("hean") == "heap"
        assert populated_store.closest("help") == "heap"
        assert populated_store.closest("sunset") == "hello"

    def test_invalid_query(self, populated_store: KVStore):
        """Test empty or None queries return None."""
        assert populated_store.closest("") is None
        assert populated_store.closest(None) is None

    def test_empty_store(self, store: KVStore):
        """Test an empty store has no closest key."""
        assert store.closest("hello") is None

    def test_single_key_store(self, store: KVStore):
        """Test a one-key store always returns its key."""
        store.set("hello", "world")

        assert store.closest("parkinglot") == "hello"
        assert store.closest("world") == "hello"

    def test_does_not_mutate(self, populated_store: KVStore):
        """Test closest leaves the store untouched."""
        populated_store.save()
        populated_store.closest("hence")

        assert populated_store.is_clean
        assert populated_store.count == 3

    def test_penalize_substitution(self, store: KVStore):
        """Test penalized substitutions change the ranking."""
        store.set("abcd", "x")
        store.set("axc", "y")

        # plain: both are 1 edit away, "axc" has the query's length
        assert store.closest("abc") == "axc"
        # penalized: the substitution costs 2, the insertion still 1
        assert store.closest("abc", penalize_substitution=True) == "abcd"

    @pytest.mark.parametrize("query", ["hel", "hea", "he", "heapx", "xhead"])
    def test_result_is_a_stored_key(self, populated_store: KVStore, query: str):
        """Test the result is always one of the stored keys."""
        assert populated_store.has_key(populated_store.closest(query))
