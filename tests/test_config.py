"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from studyplanner.config import Config, load_config
from studyplanner.models import Subject


def test_defaults() -> None:
    config = Config()
    assert config.default_subject == Subject.PHYSICS
    assert config.default_duration_minutes == 25
    assert config.log_file is None


def test_load_from_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        '{"data_dir": "%s", "default_subject": "Mathematics", "default_duration_minutes": 45}'
        % (tmp_path / "data").as_posix()
    )

    config = load_config(path)

    assert config.data_dir == tmp_path / "data"
    assert config.default_subject == Subject.MATHEMATICS
    assert config.default_duration_minutes == 45


def test_rejects_non_positive_duration(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"default_duration_minutes": 0}')

    with pytest.raises(ValidationError):
        load_config(path)
