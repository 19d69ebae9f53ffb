"""CLI tests for the query subcommands."""

import json
import sys
from pathlib import Path

import pytest

from wsdldoc import cli


FIXTURES = Path(__file__).resolve().parent / "fixtures"
ARTICLES = str(FIXTURES / "multiple_namespaces.xml")
USERS = str(FIXTURES / "wsdl_with_external_schemas.xml")


def _run_cli(args, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["wsdldoc"] + args)
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    return excinfo.value.code


def test_operations(monkeypatch, capsys):
    assert _run_cli(["operations", ARTICLES], monkeypatch) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "save": {
            "name": "Save",
            "action": "http://example.com/actions.Save",
            "input": "Save",
            "output": "SaveResponse",
        }
    }


def test_type_resolves_through_imported_schema(monkeypatch, capsys):
    assert _run_cli(["type", USERS, "User"], monkeypatch) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["name"] == "User"
    assert payload["namespace"] == "http://example.com/users/types"
    assert payload["order"] == ["username", "email", "nickname"]
    assert payload["fields"]["email"]["array"] is True


def test_type_without_external_schemas_is_not_found(monkeypatch, capsys):
    assert _run_cli(["type", USERS, "usr:UserType", "--no-external"], monkeypatch) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Not found: type 'usr:UserType'" in captured.err


def test_operation_input_and_output(monkeypatch, capsys):
    assert _run_cli(["operation", USERS, "CreateUser"], monkeypatch) == 0
    assert json.loads(capsys.readouterr().out)["name"] == "CreateUserRequest"

    assert _run_cli(["operation", USERS, "create_user", "--output"], monkeypatch) == 0
    assert json.loads(capsys.readouterr().out)["name"] == "CreateUserResponse"


def test_unknown_operation_is_not_found(monkeypatch, capsys):
    assert _run_cli(["operation", ARTICLES, "Delete"], monkeypatch) == 1
    assert "input type of operation 'Delete'" in capsys.readouterr().err


def test_types_report(monkeypatch, capsys):
    assert _run_cli(["types", ARTICLES], monkeypatch) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["type_definitions"] == [{"path": ["Save", "article"], "type": "Article"}]
    assert payload["type_namespaces"][0] == {
        "path": ["Save"],
        "namespace": "http://example.com/actions",
    }


def test_output_is_deterministic(monkeypatch, capsys):
    _run_cli(["types", USERS], monkeypatch)
    first = capsys.readouterr().out
    _run_cli(["types", USERS], monkeypatch)
    assert capsys.readouterr().out == first


def test_quiet_suppresses_output(monkeypatch, capsys):
    assert _run_cli(["operations", ARTICLES, "--quiet"], monkeypatch) == 0
    assert capsys.readouterr().out == ""


def test_missing_document_is_an_error(monkeypatch, capsys, tmp_path):
    assert _run_cli(["operations", str(tmp_path / "missing.wsdl")], monkeypatch) == 1
    assert "Error: Cannot read document" in capsys.readouterr().err


def test_malformed_document_is_an_error(monkeypatch, capsys):
    assert _run_cli(["operations", "<definitions>"], monkeypatch) == 1
    assert "Error: Malformed document" in capsys.readouterr().err


def test_no_command_prints_help(monkeypatch, capsys):
    assert _run_cli([], monkeypatch) == 1
    assert "usage: wsdldoc" in capsys.readouterr().out
