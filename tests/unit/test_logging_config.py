import logging

import pytest

from pms_monitoring import logging_config


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_writes_service_log(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.chdir(tmp_path)

    logging_config.setup_logging("pms-monitoring")
    logging.getLogger("pms_monitoring.test").info("cycle finished")
    for handler in restore_root_logger.handlers:
        handler.flush()

    log_file = tmp_path / "logs" / "pms-monitoring.log"
    assert log_file.exists()
    assert "cycle finished" in log_file.read_text()
    assert logging.getLogger("aiohttp").level == logging.WARNING


def test_setup_logging_honours_configured_directory(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "logging_config.json").write_text('{"log_directory": "%s"}' % (tmp_path / "custom").as_posix())

    logging_config.setup_logging("pms-monitoring")

    assert (tmp_path / "custom" / "pms-monitoring.log").exists()


def test_setup_logging_is_idempotent(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.chdir(tmp_path)

    logging_config.setup_logging("pms-monitoring")
    logging_config.setup_logging("pms-monitoring")

    assert len(restore_root_logger.handlers) == 2


def test_user_friendly_mode_has_console_only(tmp_path, monkeypatch, restore_root_logger):
    monkeypatch.chdir(tmp_path)

    logging_config.setup_logging(user_friendly=True)

    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.handlers[0].level == logging.WARNING
    assert not (tmp_path / "logs").exists()
