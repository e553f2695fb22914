import shutil
import subprocess

import pytest


def git(cwd, *args):
    return subprocess.run(["git", *args], cwd=cwd, check=True,
                          capture_output=True, text=True).stdout


@pytest.fixture
def git_repo(tmp_path):
    """A fresh repository with one committed file, ``app.js``."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    root = tmp_path / "repo"
    root.mkdir()
    git(root, "init", "-q")
    git(root, "config", "user.email", "dev@example.com")
    git(root, "config", "user.name", "Dev")
    git(root, "config", "commit.gpgsign", "false")
    git(root, "config", "core.autocrlf", "false")
    (root / "app.js").write_text("start();\nstop();\n", encoding="utf-8")
    git(root, "add", "app.js")
    git(root, "commit", "-q", "-m", "initial")
    return root


@pytest.fixture
def run_git():
    return git


@pytest.fixture
def index_bytes():
    """Raw bytes of a path as staged in the index."""
    def _read(cwd, path):
        return subprocess.run(["git", "show", f":{path}"], cwd=cwd, check=True,
                              capture_output=True).stdout
    return _read
