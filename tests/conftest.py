"""Pytest configuration and fixtures"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Keep config, sessions and history out of the real home directory"""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("PINE_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("PINE_MODEL", raising=False)
    return config_dir


@pytest.fixture
def fs_tree(tmp_path):
    """A small directory tree:

    fs/
      .config/  .hidden/  opt/  user/  usr/local/
      notes.txt
    """
    root = tmp_path / "fs"
    for name in [".config", ".hidden", "opt", "user", "usr/local"]:
        (root / name).mkdir(parents=True)
    (root / "notes.txt").write_text("not a directory")
    return root


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Point ~ at a temporary directory"""
    home = tmp_path / "home"
    (home / "projects" / "pine").mkdir(parents=True)
    (home / "pictures").mkdir()
    monkeypatch.setenv("HOME", str(home))
    assert os.path.expanduser("~") == str(home)
    return home
