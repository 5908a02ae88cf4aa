import io
from datetime import datetime

import pytest

from servercore.log import LogDispatcher, LogMessage, LogType
from servercore.timer import Clock


def _fixed_clock(holder):
    return Clock(wall_clock=lambda: holder["now"])


def test_log_message_format_pinned():
    record = LogMessage(LogType.INFO, "hello", "2024/01/02 03:04:05.006", 7, "func")
    assert record.format() == (
        "2024/01/02 03:04:05.006 INFO    7     --- func"
        + " " * 26
        + " : hello\n"
    )


@pytest.mark.parametrize(
    "log_type,label",
    [
        (LogType.INFO, " INFO    "),
        (LogType.SYSTEM, " SYSTEM  "),
        (LogType.WARNING, " WARNING "),
        (LogType.ERROR, " ERROR   "),
    ],
)
def test_log_message_labels(log_type, label):
    line = LogMessage(log_type, "m", "ts", 1, "f").format()
    assert line.startswith("ts" + label)
    assert line.endswith(" : m\n")


def test_log_message_pads_function_and_thread():
    line = LogMessage(LogType.ERROR, "x", "", 12, "abc").format()
    head, _, rest = line.partition("--- ")
    assert head == " ERROR   12    "
    assert rest.index(" : ") == 30


def test_log_message_without_function_name():
    line = LogMessage(LogType.INFO, "x", "t", 3, None).format()
    assert "--- " + " " * 30 + " : x\n" in line


def test_dispatcher_writes_file_with_bom(tmp_path):
    holder = {"now": datetime(2024, 1, 2, 3, 4, 5, 6000)}
    log = LogDispatcher(tmp_path, clock=_fixed_clock(holder))
    log.start()
    log.info("hello")
    log.shutdown()
    path = tmp_path / "Logs" / "Serverlog_2024_01_02.log"
    assert log.log_path == path
    content = path.read_text(encoding="utf-8")
    assert content.startswith("\ufeff")
    lines = content[1:].splitlines()
    assert "LogManager instance initialized" in lines[0]
    assert lines[1].startswith("2024/01/02 03:04:05.006 INFO    ")
    assert "test_dispatcher_writes_file_with_bom" in lines[1]
    assert lines[1].endswith(" : hello")


def test_dispatcher_helpers_use_types(tmp_path):
    log = LogDispatcher(tmp_path)
    log.start()
    log.system("s-msg")
    log.warning("w-msg")
    log.error("e-msg")
    log.shutdown()
    text = log.log_path.read_text(encoding="utf-8")
    lines = {line.rsplit(" : ", 1)[-1]: line for line in text.splitlines()}
    assert " SYSTEM  " in lines["s-msg"]
    assert " WARNING " in lines["w-msg"]
    assert " ERROR   " in lines["e-msg"]


def test_dispatcher_console_output(tmp_path):
    console = io.StringIO()
    log = LogDispatcher(tmp_path, console=console)
    log.start()
    log.error("boom")
    log.shutdown()
    output = console.getvalue()
    assert "boom" in output
    assert output.endswith("\033[0m")


def test_dispatcher_rolls_over_on_new_day(tmp_path):
    holder = {"now": datetime(2024, 1, 2, 23, 59, 59)}
    clock = _fixed_clock(holder)
    clock.is_new_day()
    log = LogDispatcher(tmp_path, clock=clock)
    log.start()
    holder["now"] = datetime(2024, 1, 3, 0, 0, 1)
    log.info("tomorrow")
    log.shutdown()
    first = tmp_path / "Logs" / "Serverlog_2024_01_02.log"
    second = tmp_path / "Logs" / "Serverlog_2024_01_03.log"
    assert first.exists()
    assert "tomorrow" in second.read_text(encoding="utf-8")
    assert "tomorrow" not in first.read_text(encoding="utf-8")