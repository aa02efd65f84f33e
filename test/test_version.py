"""Tests for version parsing, validation and comparison."""

from __future__ import annotations

import itertools
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ModelHub.core.errors import ValidationError
from ModelHub.core.version import Version, compare_versions, sort_versions, validate_version

_SAMPLES = ["0.6.0", "0.6.0.1", "0.7.0", "0.10.0", "0.10.2", "1", "1.0.1", "1.0.3", "1.1", "2.0.0.0"]


class TestValidateVersion(unittest.TestCase):
    def test_accepts_dotted_numbers(self) -> None:
        for text in ("0", "1.0", "0.6.0.1", "10.20.30", " 1.2 "):
            with self.subTest(text=text):
                self.assertEqual(validate_version(text), text.strip())

    def test_rejects_malformed_strings(self) -> None:
        for text in ("", "1.a", "1..2", "-1", "1.2.", ".1", "v1.0", "1.0-beta", "latest"):
            with self.subTest(text=text):
                with self.assertRaises(ValidationError):
                    validate_version(text)

    def test_rejects_non_strings(self) -> None:
        with self.assertRaises(ValidationError):
            validate_version(1.0)  # type: ignore[arg-type]

    def test_compare_validates_strings(self) -> None:
        with self.assertRaises(ValidationError):
            compare_versions("1.x", "1.0")


class TestCompareVersions(unittest.TestCase):
    def test_directions(self) -> None:
        self.assertEqual(compare_versions("1.0.0", "1.1.0"), 1)
        self.assertEqual(compare_versions("1.1.0", "1.0.0"), -1)
        self.assertEqual(compare_versions("0.9.3", "0.10.0"), 1)
        self.assertEqual(compare_versions("0.6.0.1", "0.6.0"), -1)

    def test_trailing_zero_equivalence(self) -> None:
        self.assertEqual(compare_versions("1.0", "1.0.0"), 0)
        self.assertEqual(compare_versions("1.2", "1.2.0.0"), 0)
        self.assertEqual(compare_versions("2", "2.0"), 0)

    def test_latest_sentinel_is_always_ahead(self) -> None:
        for text in _SAMPLES + ["999.999"]:
            with self.subTest(text=text):
                self.assertEqual(compare_versions(text, None), 1)

    def test_reflexive(self) -> None:
        for text in _SAMPLES:
            with self.subTest(text=text):
                self.assertEqual(compare_versions(text, text), 0)

    def test_antisymmetric(self) -> None:
        for a, b in itertools.combinations(_SAMPLES, 2):
            with self.subTest(a=a, b=b):
                self.assertEqual(compare_versions(a, b), -compare_versions(b, a))

    def test_transitive(self) -> None:
        for a, b, c in itertools.permutations(_SAMPLES, 3):
            if compare_versions(a, b) == 1 and compare_versions(b, c) == 1:
                with self.subTest(a=a, b=b, c=c):
                    self.assertEqual(compare_versions(a, c), 1)

    def test_accepts_version_objects(self) -> None:
        self.assertEqual(compare_versions(Version.parse("1.0"), "1.0.1"), 1)


class TestVersionObject(unittest.TestCase):
    def test_equality_ignores_trailing_zeros_but_keeps_text(self) -> None:
        short = Version.parse("1.0")
        long = Version.parse("1.0.0")
        self.assertEqual(short, long)
        self.assertEqual(hash(short), hash(long))
        self.assertEqual(str(short), "1.0")
        self.assertEqual(str(long), "1.0.0")

    def test_ordering_matches_compare(self) -> None:
        self.assertLess(Version.parse("0.9.5"), Version.parse("0.10.0"))
        self.assertGreater(Version.parse("1.0.0.1"), Version.parse("1"))
        self.assertLessEqual(Version.parse("1.1"), Version.parse("1.1.0"))

    def test_sort_versions_dedupes_and_orders(self) -> None:
        ordered = sort_versions(["1.0.3", "0.10.0", "0.6.0", "1.0.3.0", "0.9.0"])
        self.assertEqual([str(v) for v in ordered], ["0.6.0", "0.9.0", "0.10.0", "1.0.3"])


if __name__ == "__main__":
    unittest.main()
