import os

import pytest

from dockmon_cli.core.containers import ContainerManager, ContainerRef
from dockmon_cli.core.logs.channel import open_channel
from dockmon_cli.core.logs.pump import LogPump


def collect(receiver, count, timeout=5):
    lines = []
    while len(lines) < count:
        lines.append(receiver.recv(timeout=timeout))
    return lines


def assert_reaped(pump):
    assert not pump.is_alive()
    for reader in pump.readers:
        assert not reader.is_alive()
    assert pump.process.returncode is not None
    with pytest.raises(ProcessLookupError):
        os.kill(pump.process.pid, 0)


class TestLogPump:
    """Per-container log streaming."""

    def test_finite_log_ends_channel(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_name("short-a"), sender, manager).start()
        lines = list(receiver)
        pump.join(timeout=10)

        assert len(lines) == 4
        assert all(line.startswith("[") and "| short-a] " in line for line in lines)
        out = [line.split("] ", 1)[1] for line in lines]
        assert [l for l in out if "line" in l] == ["short-a line 0", "short-a line 1", "short-a line 2"]
        assert "short-a warning" in out
        assert_reaped(pump)

    def test_tail_passed_to_runtime(self, manager):
        sender, _ = open_channel()
        pump = LogPump(ContainerRef.from_name("web"), sender, manager, tail=7)
        pump.stop()
        pump.start().join(timeout=10)
        assert pump.process.command[1:] == ["logs", "web", "--tail", "7", "--follow"]
        assert_reaped(pump)

    def test_resolved_name_replaces_raw_id(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_id("aaa111"), sender, manager).start()
        lines = collect(receiver, 20)
        receiver.close()
        pump.join(timeout=10)

        assert pump.display_name == "web"
        assert all("| web] web " in line for line in lines)
        assert not any("aaa111" in line for line in lines)
        assert_reaped(pump)

    def test_unresolvable_id_falls_back_to_raw_id(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_id("ccc333"), sender, manager).start()
        lines = collect(receiver, 10)
        receiver.close()
        pump.join(timeout=10)

        assert pump.display_name == "ccc333"
        assert all("| ccc333] ccc333 " in line for line in lines)
        assert_reaped(pump)

    def test_stdout_and_stderr_both_pumped(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_name("web"), sender, manager).start()
        lines = collect(receiver, 40)
        pump.stop()
        pump.join(timeout=10)

        assert any(" web out " in line for line in lines)
        assert any(" web err " in line for line in lines)
        outs = [int(line.rsplit(" ", 1)[1]) for line in lines if " web out " in line]
        assert outs == sorted(outs)
        assert_reaped(pump)

    def test_launch_failure_sends_one_error_line(self, missing_runtime):
        manager = ContainerManager(runtime=missing_runtime)
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_id("aaa111"), sender, manager, use_color=False).start()
        lines = list(receiver)
        pump.join(timeout=10)

        assert lines == ["[ERROR] - Failed to log aaa111"]
        assert pump.process is None
        assert not pump.is_alive()

    def test_undecodable_line_is_skipped(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_name("badutf"), sender, manager).start()
        lines = list(receiver)
        pump.join(timeout=10)

        assert [line.split("] ", 1)[1] for line in lines] == ["first", "last"]

    def test_receiver_closure_stops_readers(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_name("web"), sender, manager).start()
        collect(receiver, 5)
        receiver.close()
        pump.join(timeout=10)
        assert_reaped(pump)

    def test_stop_before_launch(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_name("web"), sender, manager)
        pump.stop()
        pump.start().join(timeout=10)
        assert_reaped(pump)
        # channel ends once the pump released its senders
        list(receiver)

    def test_receiver_closure_ends_silent_sibling_stream(self, manager):
        sender, receiver = open_channel()
        pump = LogPump(ContainerRef.from_name("quiet-a"), sender, manager).start()
        collect(receiver, 5)
        receiver.close()
        pump.join(timeout=10)
        assert_reaped(pump)
