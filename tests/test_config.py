import logging

from budgeting import config


def test_ensure_data_dir_creates_directory(tmp_path):
    target = tmp_path / "nested" / "data"
    assert config.ensure_data_dir(target) == target
    assert target.is_dir()


def test_configure_logging_sets_level():
    config.configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    config.configure_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_defaults():
    assert config.STORAGE_PREFIX == "budgeting_"
    assert config.CHART_MONTHS > 0
