import logging

from bootstrap_linux.config import ExecutionMode, RunConfig
from bootstrap_linux.logs import LOG_LEFT_MARGIN, LOGGER_NAME, LogSink, Severity, multiline


def test_entry_is_label_then_message(make_sink, output):
    sink = make_sink()
    sink.success("Bootstrap is ready!")
    assert output.getvalue() == "[ SUC ] Bootstrap is ready!\n"


def test_each_severity_has_its_label(make_sink, output):
    sink = make_sink(verbose=True)
    for severity in Severity:
        sink.log(severity, "message")
    lines = output.getvalue().splitlines()
    assert [line.split(" message")[0] for line in lines] == [s.label for s in Severity]


def test_continuation_lines_are_indented(make_sink, output):
    sink = make_sink()
    sink.info("first\nsecond")
    assert output.getvalue() == f"[ LOG ] first\n{LOG_LEFT_MARGIN}second\n"


def test_quiet_only_shows_failures(make_sink, output):
    sink = make_sink(quiet=True, verbose=True)
    sink.info("info")
    sink.success("success")
    sink.warning("warning")
    sink.dry("rm -rf /important")
    sink.debug("debug")
    sink.failure("it broke")
    sink.line()
    sink.banner("Title")
    assert output.getvalue() == "[ FAI ] it broke\n"


def test_debug_needs_verbose(make_sink, output):
    make_sink().debug("hidden")
    assert output.getvalue() == ""
    make_sink(verbose=True).debug("shown")
    assert "[ DBG ] shown" in output.getvalue()


def test_failure_does_not_stop_anything(make_sink, output):
    sink = make_sink()
    sink.failure("first")
    sink.info("second")
    assert "second" in output.getvalue()


def test_from_config(console):
    config = RunConfig(mode=ExecutionMode.DRY_RUN, quiet=True, verbose=True)
    sink = LogSink.from_config(config, console=console)
    assert sink.quiet and sink.verbose
    assert sink.log_file is None


def test_file_mirror_receives_suppressed_entries(console, tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    sink = LogSink(quiet=True, log_file=log_file, console=console)
    sink.dry("rm -rf /important")
    sink.debug("details")
    sink.close()

    text = log_file.read_text()
    assert "[INFO] [ DRY ] rm -rf /important" in text
    assert "[DEBUG] [ DBG ] details" in text


def test_file_is_truncated_unless_appending(console, tmp_path):
    log_file = tmp_path / "run.log"
    log_file.write_text("previous run\n")

    sink = LogSink(log_file=log_file, append=True, console=console)
    sink.info("second run")
    sink.close()
    assert log_file.read_text().startswith("previous run\n")

    sink = LogSink(log_file=log_file, console=console)
    sink.info("third run")
    sink.close()
    text = log_file.read_text()
    assert "previous run" not in text
    assert "third run" in text


def test_close_detaches_file_handler(console, tmp_path):
    sink = LogSink(log_file=tmp_path / "run.log", console=console)
    sink.close()
    assert logging.getLogger(LOGGER_NAME).handlers == []


def test_multiline_skips_blank_lines():
    block = "NVIDIA GA104\n\n  \nIntel UHD 770\n"
    assert multiline("GPU: 2 GPU(s) found.", block) == (
        "GPU: 2 GPU(s) found.\n- NVIDIA GA104\n- Intel UHD 770"
    )


def test_multiline_entry_is_indented_by_the_sink(make_sink, output):
    make_sink().info(multiline("Header", "a\nb"))
    assert output.getvalue() == (
        f"[ LOG ] Header\n{LOG_LEFT_MARGIN}- a\n{LOG_LEFT_MARGIN}- b\n"
    )


def test_only_failures_are_always_shown():
    assert [s for s in Severity if s.always_shown] == [Severity.FAILURE]
