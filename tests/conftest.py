"""Shared test fixtures for the yamlconfig test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from yamlconfig.section import ConfigSection


SAMPLE_DOCUMENT = """
app:
  name: billing
  debug: true
  workers: 4
  ratio: 0.75
  timeout: 1h30m
  retry_delay: 250
  zero_delay: 0
  bad_delay: not-a-duration
  hosts:
    - alpha
    - beta
  mixed: [1, "b", true, 2.5]
  nothing:
database:
  primary:
    host: db.local
    port: 5432
  replicas:
    - host: r1
    - host: r2
"""


@pytest.fixture
def sample_data() -> dict[str, Any]:
    """The parsed sample document."""
    return yaml.safe_load(SAMPLE_DOCUMENT)


@pytest.fixture
def section(sample_data: dict[str, Any]) -> ConfigSection:
    """A root section over the sample document."""
    return ConfigSection(sample_data)


@pytest.fixture
def home_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty home directory; HOME points at it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory; the test runs inside it."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work
