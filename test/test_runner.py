"""Tests for plan execution and marker progress."""

from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ModelHub.core.errors import MissingTransformationError, StepExecutionError, StepNotFoundError
from ModelHub.core.version import Version
from ModelHub.migration.context import MigrationContext
from ModelHub.migration.registry import MigrationStep, TableMigrationRegistry
from ModelHub.migration.runner import MigrationRunner
from ModelHub.migration.sequencer import build_plan
from ModelHub.storage.db import DatabaseManager, DocumentStore
from ModelHub.storage.marker import VersionMarkerStore


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def step(self, version: str, *, up: bool = True, down: bool = True, fail: str | None = None) -> MigrationStep:
        def make(direction: str):
            def transform(context) -> None:
                if fail == direction:
                    raise RuntimeError(f"boom in {version} {direction}")
                self.calls.append(f"{direction}:{version}")
            return transform

        return MigrationStep(
            version=Version.parse(version),
            up=make("up") if up else None,
            down=make("down") if down else None,
        )


class RunnerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.manager = DatabaseManager(Path(self._tmpdir.name) / "modelhub.db")
        self.store = DocumentStore(self.manager)
        self.markers = VersionMarkerStore(self.store)
        self.context = MigrationContext(store=self.store, data_dir=Path(self._tmpdir.name) / "data")
        self.recorder = _Recorder()

    def tearDown(self) -> None:
        self.manager.close()
        self._tmpdir.cleanup()

    def _runner(self, steps: list[MigrationStep]) -> tuple[MigrationRunner, TableMigrationRegistry]:
        registry = TableMigrationRegistry(steps)
        return MigrationRunner(registry, self.markers, self.context), registry


class TestForwardRun(RunnerTestCase):
    def test_runs_up_in_order_and_advances_marker(self) -> None:
        runner, registry = self._runner([
            self.recorder.step("1.0.0"),
            self.recorder.step("1.1.0"),
            self.recorder.step("1.2.0"),
        ])
        self.markers.write("1.0.0")
        plan = build_plan("1.0.0", "1.2.0", registry.discover())

        applied = runner.run(plan)

        self.assertEqual([str(v) for v in applied], ["1.1.0", "1.2.0"])
        self.assertEqual(self.recorder.calls, ["up:1.1.0", "up:1.2.0"])
        self.assertEqual(str(self.markers.read_current()), "1.2.0")
        self.assertFalse(plan)

    def test_empty_plan_is_noop(self) -> None:
        runner, registry = self._runner([self.recorder.step("1.0.0")])
        self.markers.write("1.0.0")
        self.assertEqual(runner.run(build_plan("1.0.0", "1.0.0", registry.discover())), [])
        self.assertEqual(self.recorder.calls, [])
        self.assertEqual(str(self.markers.read_current()), "1.0.0")

    def test_failure_keeps_marker_at_last_completed_step(self) -> None:
        runner, registry = self._runner([
            self.recorder.step("1.0.0"),
            self.recorder.step("1.1.0"),
            self.recorder.step("1.2.0", fail="up"),
            self.recorder.step("1.3.0"),
        ])
        self.markers.write("1.0.0")

        with self.assertRaises(StepExecutionError) as ctx:
            runner.run(build_plan("1.0.0", "1.3.0", registry.discover()))

        err = ctx.exception
        self.assertEqual(err.version, "1.2.0")
        self.assertEqual(err.direction, "up")
        self.assertIsInstance(err.original, RuntimeError)
        self.assertIs(err.__cause__, err.original)
        self.assertEqual(str(err), "boom in 1.2.0 up")
        self.assertEqual(self.recorder.calls, ["up:1.1.0"])
        self.assertEqual(str(self.markers.read_current()), "1.1.0")

    def test_rerun_resumes_from_marker(self) -> None:
        failing = self.recorder.step("1.2.0", fail="up")
        runner, registry = self._runner([
            self.recorder.step("1.0.0"),
            self.recorder.step("1.1.0"),
            failing,
        ])
        self.markers.write("1.0.0")
        with self.assertRaises(StepExecutionError):
            runner.run(build_plan("1.0.0", "1.2.0", registry.discover()))

        fixed_runner, fixed_registry = self._runner([
            self.recorder.step("1.0.0"),
            self.recorder.step("1.1.0"),
            self.recorder.step("1.2.0"),
        ])
        current = self.markers.read_current()
        fixed_runner.run(build_plan(current, "1.2.0", fixed_registry.discover()))

        self.assertEqual(self.recorder.calls, ["up:1.1.0", "up:1.2.0"])
        self.assertEqual(str(self.markers.read_current()), "1.2.0")

    def test_missing_up_is_fatal(self) -> None:
        runner, registry = self._runner([
            self.recorder.step("1.0.0"),
            self.recorder.step("1.1.0"),
            self.recorder.step("1.2.0", up=False),
        ])
        self.markers.write("1.0.0")

        with self.assertRaises(MissingTransformationError) as ctx:
            runner.run(build_plan("1.0.0", "1.2.0", registry.discover()))

        self.assertEqual(ctx.exception.version, "1.2.0")
        self.assertEqual(ctx.exception.direction, "up")
        self.assertIn("1.2.0", str(ctx.exception))
        self.assertEqual(str(self.markers.read_current()), "1.1.0")

    def test_unloadable_step(self) -> None:
        runner, _ = self._runner([self.recorder.step("1.0.0")])
        plan = build_plan("1.0.0", "1.1.0", ["1.0.0", "1.1.0"])
        with self.assertRaises(StepNotFoundError):
            runner.run(plan)


class TestBackwardRun(RunnerTestCase):
    def test_runs_down_descending(self) -> None:
        runner, registry = self._runner([
            self.recorder.step("1.0.0"),
            self.recorder.step("1.1.0"),
            self.recorder.step("1.2.0"),
        ])
        self.markers.write("1.2.0")

        runner.run(build_plan("1.2.0", "1.0.0", registry.discover()))

        self.assertEqual(self.recorder.calls, ["down:1.1.0", "down:1.0.0"])
        self.assertEqual(str(self.markers.read_current()), "1.0.0")

    def test_missing_down_keeps_marker_at_last_completed_step(self) -> None:
        runner, registry = self._runner([
            self.recorder.step("1.0.0"),
            self.recorder.step("1.1.0", down=False),
            self.recorder.step("1.2.0"),
            self.recorder.step("1.3.0"),
        ])
        self.markers.write("1.3.0")

        with self.assertRaises(MissingTransformationError) as ctx:
            runner.run(build_plan("1.3.0", "1.0.0", registry.discover()))

        self.assertEqual(ctx.exception.version, "1.1.0")
        self.assertEqual(ctx.exception.direction, "down")
        self.assertEqual(self.recorder.calls, ["down:1.2.0"])
        self.assertEqual(str(self.markers.read_current()), "1.2.0")

    def test_round_trip_restores_marker(self) -> None:
        runner, registry = self._runner([
            self.recorder.step("0.6.0"),
            self.recorder.step("0.7.0"),
            self.recorder.step("0.8.0"),
        ])
        self.markers.write("0.6.0")

        runner.run(build_plan("0.6.0", "0.8.0", registry.discover()))
        runner.run(build_plan("0.8.0", "0.6.0", registry.discover()))

        self.assertEqual(str(self.markers.read_current()), "0.6.0")
        self.assertEqual(
            self.recorder.calls,
            ["up:0.7.0", "up:0.8.0", "down:0.7.0", "down:0.6.0"],
        )


if __name__ == "__main__":
    unittest.main()
