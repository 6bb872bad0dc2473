import io

import pytest

from minirel.dbtools import destroy_database, main


@pytest.fixture
def database(tmp_path):
    path = tmp_path / "testdb"
    path.mkdir()
    (path / "relcat").write_bytes(b"\0" * 16)
    (path / "attrcat").write_bytes(b"\0" * 16)
    return path


def test_destroy_confirmed_removes_directory(database):
    assert destroy_database(str(database), True) is True
    assert not database.exists()


def test_destroy_unconfirmed_keeps_directory(database):
    assert destroy_database(str(database), False) is False
    assert (database / "relcat").exists()


def test_destroy_missing_directory_raises(tmp_path):
    with pytest.raises(OSError):
        destroy_database(str(tmp_path / "absent"), True)


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 1
    assert "Usage:" in capsys.readouterr().err


def test_main_yes_removes(database, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("\n  yes\n"))
    assert main([str(database)]) == 0
    out = capsys.readouterr().out
    assert f"Enter y if you want to delete {database}/*" in out
    assert f"Executing rm -r {database}" in out
    assert not database.exists()


def test_main_upper_case_yes_removes(database, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("Y\n"))
    assert main([str(database)]) == 0
    assert not database.exists()


@pytest.mark.parametrize("answer", ["n\n", "no\n", ""])
def test_main_other_answers_keep(database, monkeypatch, capsys, answer):
    monkeypatch.setattr("sys.stdin", io.StringIO(answer))
    assert main([str(database)]) == 0
    assert "Database not destroyed." in capsys.readouterr().out
    assert database.exists()


def test_main_missing_directory_fails(tmp_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("y\n"))
    assert main([str(tmp_path / "absent")]) == 1