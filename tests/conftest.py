"""Shared fixtures for dirsync tests."""

import pytest
from click.testing import CliRunner


@pytest.fixture
def src(tmp_path):
    """An empty source directory."""
    d = tmp_path / "src"
    d.mkdir()
    return d


@pytest.fixture
def dst(tmp_path):
    """An empty destination directory."""
    d = tmp_path / "dst"
    d.mkdir()
    return d


@pytest.fixture
def runner():
    return CliRunner()
