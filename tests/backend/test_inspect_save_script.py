import importlib.util
import json
from pathlib import Path

import pytest

from savebox_lib.settings import SaveSettings
from tests.helpers import make_store

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "inspect_save.py"


@pytest.fixture
def inspect_save():
    spec = importlib.util.spec_from_file_location("inspect_save", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run(module, monkeypatch, *argv):
    monkeypatch.setattr("sys.argv", ["inspect_save.py", *argv])
    return module.main()


def test_prints_plain_entries_as_json(inspect_save, monkeypatch, capsys, tmp_path):
    make_store(tmp_path).store_dictionary({"a": 1, "b": "x"}, SaveSettings(file_name="p.json"))
    assert run(inspect_save, monkeypatch, str(tmp_path / "p.json"), "--json") == 0
    assert json.loads(capsys.readouterr().out) == {"a": 1, "b": "x"}


def test_decrypts_with_password(inspect_save, monkeypatch, capsys, tmp_path):
    s = SaveSettings(file_name="e.json", encryption="aes", password="abc")
    make_store(tmp_path).set_key("k", "v", s)
    path = str(tmp_path / "e.json.encrypted")
    assert run(inspect_save, monkeypatch, path, "-p", "abc", "-j") == 0
    assert json.loads(capsys.readouterr().out) == {"k": "v"}
    assert run(inspect_save, monkeypatch, path, "-p", "wrong") == 3
    assert run(inspect_save, monkeypatch, path) == 2


def test_missing_file(inspect_save, monkeypatch, tmp_path):
    assert run(inspect_save, monkeypatch, str(tmp_path / "nope.json")) == 2
