import logging

from navforge.state import NavigatorMode
from navforge.util.logging import format_event, get_logger, log_event, redact


def test_format_event_renders_key_value_pairs():
    line = format_event(
        "director.selected",
        task="task-1",
        step=3,
        mode=NavigatorMode.VISION,
        score=0.52,
        error=OSError("disk unavailable"),
    )
    assert line == (
        "director.selected task=task-1 step=3 mode=vision score=0.520 "
        "error='disk unavailable'"
    )


def test_get_logger_nests_under_package_root():
    logger = get_logger("custom")
    assert logger.name == "navforge.custom"
    assert get_logger("navforge.director").name == "navforge.director"
    assert logging.getLogger("navforge").handlers


def test_log_event_respects_level(caplog):
    logger = get_logger("navforge.test_logging", logging.WARNING)
    log_event(logger, logging.INFO, "quiet.event", value=1)
    log_event(logger, logging.WARNING, "loud.event", value=2)
    assert "quiet.event" not in caplog.text
    assert "loud.event value=2" in caplog.text


def test_redact_scrubs_tokens_and_explicit_secrets():
    text = redact("Bearer abc.def and sk-abcdefgh1234 with hunter2", ["hunter2"])
    assert text == "Bearer [REDACTED] and [REDACTED] with [REDACTED]"
