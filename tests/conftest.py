"""Shared pytest setup.

Puts the repository root on sys.path so `savebox_lib` and `tests.helpers`
import without an editable install or PYTHONPATH.
"""
import sys
from pathlib import Path


def pytest_configure(config):
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
