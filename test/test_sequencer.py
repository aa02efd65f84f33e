"""Tests for migration plan construction."""

from __future__ import annotations

import itertools
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ModelHub.core.errors import UnknownVersionError
from ModelHub.migration.sequencer import BACKWARD, FORWARD, build_plan

_AVAILABLE = ["1.2.0", "0.6.0", "1.0.0", "0.7.2", "1.1.0", "0.10.0"]


def _names(plan) -> list[str]:
    return [str(v) for v in plan.versions()]


class TestBuildPlan(unittest.TestCase):
    def test_forward_plan_skips_installed_step(self) -> None:
        plan = build_plan("1.0.0", "1.2.0", ["1.0.0", "1.1.0", "1.2.0"])
        self.assertEqual(plan.direction, FORWARD)
        self.assertEqual(plan.transformation, "up")
        self.assertEqual(_names(plan), ["1.1.0", "1.2.0"])

    def test_backward_plan_runs_descending_without_installed_step(self) -> None:
        plan = build_plan("1.2.0", "0.7.2", _AVAILABLE)
        self.assertEqual(plan.direction, BACKWARD)
        self.assertEqual(plan.transformation, "down")
        self.assertEqual(_names(plan), ["1.1.0", "1.0.0", "0.10.0", "0.7.2"])

    def test_same_version_is_empty(self) -> None:
        for version in _AVAILABLE + ["9.9.9"]:
            with self.subTest(version=version):
                plan = build_plan(version, version, _AVAILABLE)
                self.assertFalse(plan)
                self.assertEqual(len(plan), 0)

    def test_trailing_zero_target_is_empty(self) -> None:
        self.assertFalse(build_plan("1.1.0", "1.1", _AVAILABLE))

    def test_latest_sentinel_uses_newest_available(self) -> None:
        plan = build_plan("0.10.0", None, _AVAILABLE)
        self.assertEqual(_names(plan), ["1.0.0", "1.1.0", "1.2.0"])

    def test_latest_sentinel_when_already_newest(self) -> None:
        self.assertFalse(build_plan("1.2.0", None, _AVAILABLE))

    def test_forward_plans_concatenate(self) -> None:
        ordered = sorted(_AVAILABLE, key=lambda v: tuple(int(p) for p in v.split(".")))
        for a, b, c in itertools.combinations(ordered, 3):
            with self.subTest(a=a, b=b, c=c):
                whole = _names(build_plan(a, c, _AVAILABLE))
                parts = _names(build_plan(a, b, _AVAILABLE)) + _names(build_plan(b, c, _AVAILABLE))
                self.assertEqual(whole, parts)

    def test_backward_is_reverse_window_of_forward(self) -> None:
        forward = build_plan("0.7.2", "1.1.0", _AVAILABLE)
        backward = build_plan("1.1.0", "0.7.2", _AVAILABLE)
        # up runs 0.10.0..1.1.0; down runs 1.0.0..0.7.2, landing on each step's version.
        self.assertEqual(_names(forward), ["0.10.0", "1.0.0", "1.1.0"])
        self.assertEqual(_names(backward), ["1.0.0", "0.10.0", "0.7.2"])

    def test_unknown_installed_version(self) -> None:
        with self.assertRaisesRegex(UnknownVersionError, "Installed version 0.8.0"):
            build_plan("0.8.0", "1.0.0", _AVAILABLE)

    def test_unknown_target_version(self) -> None:
        with self.assertRaisesRegex(UnknownVersionError, "Requested version 3.0"):
            build_plan("1.0.0", "3.0", _AVAILABLE)

    def test_latest_with_no_steps(self) -> None:
        with self.assertRaises(UnknownVersionError):
            build_plan("1.0.0", None, [])

    def test_plan_is_consumed_destructively(self) -> None:
        plan = build_plan("0.6.0", "0.10.0", _AVAILABLE)
        self.assertEqual(str(plan.pop_next()), "0.7.2")
        self.assertEqual(_names(plan), ["0.10.0"])
        plan.pop_next()
        self.assertFalse(plan)


if __name__ == "__main__":
    unittest.main()
