from pathlib import Path

from log_config.logger import (
    configure_file_logging,
    configure_logging,
    get_logger,
    log_performance,
    logger,
    remove_file_logging,
)


def test_file_handlers_replaced_on_reconfigure(tmp_path: Path) -> None:
    first = configure_file_logging(tmp_path / "a")
    second = configure_file_logging(tmp_path / "b")

    assert len(first) == 2
    assert len(second) == 2
    assert not set(first) & set(second)
    assert (tmp_path / "b").is_dir()

    remove_file_logging()


def test_log_performance_threshold() -> None:
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level}|{message}")
    try:
        log_performance("trim", 10.0)
        log_performance("trim", 80.0)
    finally:
        logger.remove(handler_id)

    assert messages[0].startswith("DEBUG|Performance: trim")
    assert messages[1].startswith("WARNING|Slow operation: trim")


def test_configure_logging_console_level() -> None:
    configure_logging("WARNING")
    configure_logging("INFO")
    assert get_logger(__name__) is not None
