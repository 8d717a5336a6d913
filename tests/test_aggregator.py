import io
import os
import threading

import pytest

from dockmon_cli.core.containers import ContainerManager, ContainerRef
from dockmon_cli.core.logs.aggregator import LogAggregator


class StopAfter(io.StringIO):
    """Output that stops the aggregator once enough lines were written."""

    def __init__(self, lines):
        super().__init__()
        self.aggregator = None
        self.lines = lines

    def write(self, text):
        written = super().write(text)
        if self.getvalue().count("\n") >= self.lines:
            self.aggregator.stop()
        return written


class BrokenOutput(io.StringIO):
    def write(self, text):
        raise BrokenPipeError()


def assert_all_reaped(aggregator):
    for pump in aggregator.pumps:
        assert not pump.is_alive()
        for reader in pump.readers:
            assert not reader.is_alive()
        assert pump.process.returncode is not None
        with pytest.raises(ProcessLookupError):
            os.kill(pump.process.pid, 0)


class TestLogAggregator:
    """Fan-in of several pumps."""

    def test_runs_until_every_pump_finished(self, manager):
        output = io.StringIO()
        aggregator = LogAggregator(manager, output=output)
        aggregator.add(ContainerRef.from_name("short-a"))
        aggregator.add(ContainerRef.from_name("short-b"))

        assert aggregator.run() == 8
        text = output.getvalue()
        for name in ("short-a", "short-b"):
            assert f"| {name}] {name} line 0" in text
            assert f"| {name}] {name} warning" in text
        assert_all_reaped(aggregator)

    def test_no_pumps_returns_immediately(self, manager):
        assert LogAggregator(manager, output=io.StringIO()).run() == 0

    def test_stop_tears_down_every_pump(self, manager):
        output = StopAfter(lines=30)
        aggregator = LogAggregator(manager, output=output)
        output.aggregator = aggregator
        for name in ("one", "two", "three"):
            aggregator.add(ContainerRef.from_name(name))

        written = aggregator.run()

        assert written >= 30
        assert_all_reaped(aggregator)

    def test_stop_from_another_thread(self, manager):
        aggregator = LogAggregator(manager, output=io.StringIO())
        aggregator.add(ContainerRef.from_id("aaa111"))
        aggregator.add(ContainerRef.from_id("bbb222"))
        timer = threading.Timer(0.5, aggregator.stop)
        timer.start()

        aggregator.run()
        timer.join()

        assert {pump.display_name for pump in aggregator.pumps} == {"web", "api"}
        assert_all_reaped(aggregator)

    def test_broken_pipe_stops_pumps(self, manager):
        aggregator = LogAggregator(manager, output=BrokenOutput())
        aggregator.add(ContainerRef.from_name("web"))

        assert aggregator.run() == 0
        assert_all_reaped(aggregator)

    def test_launch_failures_are_reported_per_container(self, missing_runtime):
        output = io.StringIO()
        aggregator = LogAggregator(ContainerManager(runtime=missing_runtime), output=output)
        aggregator.add(ContainerRef.from_name("ghost"))
        aggregator.add(ContainerRef.from_name("other"))

        assert aggregator.run() == 2
        assert sorted(output.getvalue().splitlines()) == [
            "[ERROR] - Failed to log ghost",
            "[ERROR] - Failed to log other",
        ]
        assert not any(pump.is_alive() for pump in aggregator.pumps)

    def test_color_output(self, manager):
        output = io.StringIO()
        aggregator = LogAggregator(manager, use_color=True, output=output)
        aggregator.add(ContainerRef.from_name("short-a"))
        aggregator.run()
        first = output.getvalue().splitlines()[0]
        assert first.startswith("[\033[1;36m")
        assert "\033[1;32mshort-a\033[0m] " in first
