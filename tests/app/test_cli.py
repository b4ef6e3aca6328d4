from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.exc import OperationalError

from refcompose.app import ImportResult, verify_stored
from refcompose.domain.errors import CycleError, NotFoundError
from refcompose.ui import cli as cli_module
from tests.helpers.bundles import write_bundle

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from refcompose.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture(autouse=True)
def _clear_composition_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REFCOMPOSE_STRICT_CHECKSUMS", raising=False)
    monkeypatch.delenv("REFCOMPOSE_RESOLVE_TIMEOUT", raising=False)


def test_verify_passes_options_through(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_verify(path: str, set_ids: list[str] | None, **kwargs: object) -> list[object]:
        captured.update(path=path, set_ids=set_ids, **kwargs)
        return []

    monkeypatch.setattr(cli_module, "verify_document", fake_verify)

    cli_module.main(
        ["verify", "bundle.json", "--set", "a", "--set", "b", "--strict", "--timeout", "2.5"]
    )

    assert captured == {
        "path": "bundle.json",
        "set_ids": ["a", "b"],
        "strict": True,
        "timeout": 2.5,
    }


def test_verify_defaults_leave_config_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_verify(path: str, set_ids: list[str] | None, **kwargs: object) -> list[object]:
        captured.update(set_ids=set_ids, **kwargs)
        return []

    monkeypatch.setattr(cli_module, "verify_document", fake_verify)

    cli_module.main(["verify", "bundle.json"])

    assert captured == {"set_ids": None, "strict": None, "timeout": None}


def test_verify_prints_status_lines(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli_module.main(["verify", str(write_bundle(tmp_path, declared="b" * 32))])

    lines = capsys.readouterr().out.splitlines()

    assert lines[0].startswith("nuclear: ok (references=1, joins=0")
    assert lines[1].startswith("complete: checksum mismatch (references=2, joins=0")


def test_verify_json_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli_module.main(["verify", str(write_bundle(tmp_path)), "--set", "complete", "--json"])

    (payload,) = json.loads(capsys.readouterr().out)

    assert payload["id"] == "complete"
    assert payload["checksumMatches"] is True
    assert [reference["id"] for reference in payload["references"]] == ["chr1", "chrM"]


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (CycleError(["a", "b", "a"]), 1),
        (NotFoundError("a"), 1),
        (OSError("unreadable"), 2),
        (ValueError("bad"), 2),
        (OperationalError("SELECT 1", {}, Exception("database is locked")), 2),
    ],
)
def test_verify_failures_map_to_exit_codes(
    monkeypatch: pytest.MonkeyPatch, error: Exception, code: int
) -> None:
    def fake_verify(*_: object, **__: object) -> list[object]:
        raise error

    monkeypatch.setattr(cli_module, "verify_document", fake_verify)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["verify", "bundle.json"])

    assert excinfo.value.code == code


def test_strict_mismatch_exits_with_failure(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["verify", str(write_bundle(tmp_path, declared="b" * 32)), "--strict"])

    assert excinfo.value.code == 1


def test_malformed_bundle_exits_with_usage_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"referenceSets": [{"id": 1}]}', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["verify", str(path)])

    assert excinfo.value.code == 2


@pytest.mark.parametrize(
    "argv",
    [
        ["verify", "x.json", "--timeout", "0"],
        ["--log-level", "loud", "verify", "x.json"],
    ],
)
def test_invalid_options_exit_with_usage_error(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(argv)

    assert excinfo.value.code == 2


def test_verify_db_requires_set(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "verify_stored", lambda *_, **__: [])

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["verify-db"])

    assert excinfo.value.code == 2


def test_import_reports_counts(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        cli_module,
        "import_document",
        lambda path: ImportResult(reference_sets=2, references=3, joins=1),
    )

    cli_module.main(["import", "bundle.json"])

    assert capsys.readouterr().out.strip() == "Imported reference_sets=2, references=3, joins=1"


def test_import_twice_is_idempotent(
    tmp_path: Path,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = str(write_bundle(tmp_path))

    cli_module.main(["import", path])
    cli_module.main(["import", path])

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["Imported reference_sets=2, references=2, joins=0"] * 2
    (view,) = verify_stored(["complete"], unit_of_work_factory=sqlite_unit_of_work)
    assert view.checksum_matches
    assert len(view.references) == 2
