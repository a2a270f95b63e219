"""End-to-end tests for the command handlers (cli/app.py).

Every command runs against the in-memory store from ``conftest.py``
except the final class, which goes through the real ``local`` backend
in a temporary directory.
"""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from blobdrive.cli import exit_codes
from blobdrive.cli.app import cli, main
from blobdrive.exceptions import (
    LocalFileError,
    ObjectNotFoundError,
    QueryLimitExceededError,
    StorageError,
)

if TYPE_CHECKING:
    from conftest import MemoryStorage


def _seed(storage: MemoryStorage) -> None:
    storage.add("report.txt", b"first", last_modified="2024-03-01T00:00:00.000Z")
    storage.add("report-final.txt", b"second!", last_modified="2024-01-01T00:00:00.000Z")
    storage.add("photo.jpg", b"jpeg", last_modified="2024-02-01T00:00:00.000Z")


def _stdout_lines(capsys: pytest.CaptureFixture[str]) -> list[str]:
    return capsys.readouterr().out.splitlines()


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

class TestList:
    def test_default_columns_keep_catalog_order(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        assert main(["ls"]) == exit_codes.SUCCESS
        assert _stdout_lines(capsys) == [
            "2024-03-01T00:00:00.000Z           5  report.txt",
            "2024-01-01T00:00:00.000Z           7  report-final.txt",
            "2024-02-01T00:00:00.000Z           4  photo.jpg",
        ]

    def test_empty_catalog_prints_nothing(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(["ls"]) == exit_codes.SUCCESS
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize("alias", ["ls", "list", "l"])
    def test_aliases(
        self, alias: str, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        main([alias, "-d", "id"])
        assert _stdout_lines(capsys) == ["id1", "id2", "id3"]

    def test_filter(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        main(["ls", "-f", "report", "-d", "name"])
        assert _stdout_lines(capsys) == ["report.txt", "report-final.txt"]

    def test_sort_by_name_reversed(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        main(["ls", "-s", "name", "-r", "-d", "name"])
        assert _stdout_lines(capsys) == ["report.txt", "report-final.txt", "photo.jpg"]

    def test_sort_by_size(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        main(["ls", "--sorting", "size", "-d", "name"])
        assert _stdout_lines(capsys) == ["photo.jpg", "report.txt", "report-final.txt"]

    def test_display_accepts_commas_and_spaces(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        main(["ls", "-f", "photo", "-d", "name,id", "size"])
        assert _stdout_lines(capsys) == ["         4  id3  photo.jpg"]

    def test_limit_caps_before_sorting(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        main(["ls", "-l", "2", "-s", "size", "-d", "name"])
        assert _stdout_lines(capsys) == ["report.txt", "report-final.txt"]

    def test_force_limit_raises_with_matches(self, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        with pytest.raises(QueryLimitExceededError) as exc_info:
            main(["ls", "-l", "2", "-F"])
        assert exc_info.value.limit == 2
        assert len(exc_info.value.matches) == 3

    def test_limit_one_on_unique_match(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        main(["ls", "-1", "-f", "final", "-d", "id"])
        assert _stdout_lines(capsys) == ["id2"]

    def test_limit_one_on_ambiguous_match(self, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        with pytest.raises(QueryLimitExceededError):
            main(["ls", "-1", "-f", "report"])

    @pytest.mark.parametrize("argv", [["ls", "-l", "-1"], ["ls", "-l", "x"], ["ls", "-d", "owner"], ["ls", "-s", "type"]])
    def test_invalid_arguments_exit_two(self, argv: list[str], use_storage: MemoryStorage) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 2


# ---------------------------------------------------------------------------
# up
# ---------------------------------------------------------------------------

class TestUpload:
    def test_file_uses_its_name(
        self, tmp_path: Path, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        source = tmp_path / "notes.txt"
        source.write_bytes(b"hello")

        assert main(["up", str(source)]) == exit_codes.SUCCESS
        assert _stdout_lines(capsys) == ["id1"]
        assert use_storage.objects["id1"].name == "notes.txt"
        assert use_storage.contents["id1"] == b"hello"
        assert source.exists()

    def test_explicit_name(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        source = tmp_path / "notes.txt"
        source.write_bytes(b"hello")
        main(["upload", str(source), "-n", "remote.txt"])
        assert use_storage.objects["id1"].name == "remote.txt"

    def test_overwrite_by_id(
        self, tmp_path: Path, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        existing = use_storage.add("keep-name.txt", b"old")
        source = tmp_path / "notes.txt"
        source.write_bytes(b"new content")

        main(["u", str(source), "-i", existing])
        assert _stdout_lines(capsys) == [existing]
        assert len(use_storage.objects) == 1
        assert use_storage.objects[existing].name == "keep-name.txt"
        assert use_storage.contents[existing] == b"new content"

    def test_delete_after_upload(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        source = tmp_path / "notes.txt"
        source.write_bytes(b"hello")
        main(["up", str(source), "-D"])
        assert not source.exists()
        assert use_storage.contents["id1"] == b"hello"

    def test_stdin(
        self, monkeypatch: pytest.MonkeyPatch, use_storage: MemoryStorage,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"\x00piped")))
        main(["up"])
        assert use_storage.objects["id1"].name == "STDIN"
        assert use_storage.contents["id1"] == b"\x00piped"

    def test_stdin_with_name(self, monkeypatch: pytest.MonkeyPatch, use_storage: MemoryStorage) -> None:
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"x")))
        main(["up", "-n", "clip.txt"])
        assert use_storage.objects["id1"].name == "clip.txt"

    def test_missing_file(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        with pytest.raises(LocalFileError, match="Failed to read"):
            main(["up", str(tmp_path / "absent.txt")])
        assert use_storage.objects == {}

    def test_unknown_id_fails_without_deleting(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        source = tmp_path / "notes.txt"
        source.write_bytes(b"hello")
        with pytest.raises(StorageError):
            main(["up", str(source), "-i", "nope", "-D"])
        assert source.exists()

    def test_name_and_id_are_exclusive(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["up", str(tmp_path / "f"), "-n", "a", "-i", "b"])
        assert exc_info.value.code == 2


# ---------------------------------------------------------------------------
# dl
# ---------------------------------------------------------------------------

class TestDownload:
    def test_to_stdout(
        self, use_storage: MemoryStorage, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        use_storage.add("blob.bin", b"\x00\xffraw")
        assert main(["dl", "blob"]) == exit_codes.SUCCESS
        assert capsysbinary.readouterr().out == b"\x00\xffraw"

    def test_to_file(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        output = tmp_path / "out.jpg"
        main(["download", "photo", "-o", str(output)])
        assert output.read_bytes() == b"jpeg"

    def test_by_id(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        output = tmp_path / "out"
        main(["d", "id1", "-i", "-o", str(output)])
        assert output.read_bytes() == b"first"
        assert use_storage.list_calls == 0

    def test_ambiguous_name(self, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        with pytest.raises(QueryLimitExceededError) as exc_info:
            main(["dl", "report"])
        assert [obj.id for obj in exc_info.value.matches] == ["id1", "id2"]

    def test_unknown_name(self, use_storage: MemoryStorage) -> None:
        with pytest.raises(ObjectNotFoundError):
            main(["dl", "ghost"])

    def test_pick_resolves_ambiguity(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        output = tmp_path / "out"
        with patch(
            "blobdrive.cli.candidate_prompt.prompt_candidate_selection", return_value="id2",
        ) as mock_prompt:
            main(["dl", "report", "-p", "-o", str(output)])

        target, candidates = mock_prompt.call_args.args
        assert target == "report"
        assert [obj.id for obj in candidates] == ["id1", "id2"]
        assert output.read_bytes() == b"second!"

    def test_pick_not_used_for_unique_match(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        with patch("blobdrive.cli.candidate_prompt.prompt_candidate_selection") as mock_prompt:
            main(["dl", "photo", "-p", "-o", str(tmp_path / "out")])
        mock_prompt.assert_not_called()

    def test_unwritable_output(self, tmp_path: Path, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        with pytest.raises(LocalFileError, match="Failed to write"):
            main(["dl", "photo", "-o", str(tmp_path / "missing-dir" / "out")])


# ---------------------------------------------------------------------------
# rm
# ---------------------------------------------------------------------------

class TestRemove:
    def test_by_name(
        self, use_storage: MemoryStorage, capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        assert main(["rm", "photo"]) == exit_codes.SUCCESS
        assert _stdout_lines(capsys) == ["id3"]
        assert "id3" not in use_storage.objects

    @pytest.mark.parametrize("alias", ["remove", "r"])
    def test_aliases_by_id(self, alias: str, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        main([alias, "-i", "id1"])
        assert sorted(use_storage.objects) == ["id2", "id3"]

    def test_ambiguous_name_removes_nothing(self, use_storage: MemoryStorage) -> None:
        _seed(use_storage)
        with pytest.raises(QueryLimitExceededError):
            main(["rm", "report"])
        assert len(use_storage.objects) == 3


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _run(self, monkeypatch: pytest.MonkeyPatch, argv: list[str]) -> int:
        monkeypatch.setattr(sys, "argv", ["blobdrive", *argv])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        return exc_info.value.code  # type: ignore[return-value]

    def test_success(self, monkeypatch: pytest.MonkeyPatch, use_storage: MemoryStorage) -> None:
        assert self._run(monkeypatch, ["ls"]) == exit_codes.SUCCESS

    def test_domain_error_prints_message_and_hint(
        self, monkeypatch: pytest.MonkeyPatch, use_storage: MemoryStorage,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert self._run(monkeypatch, ["rm", "ghost"]) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "No such file named ghost" in err
        assert "blobdrive ls" in err

    def test_ambiguity_lists_candidates(
        self, monkeypatch: pytest.MonkeyPatch, use_storage: MemoryStorage,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _seed(use_storage)
        assert self._run(monkeypatch, ["dl", "report"]) == exit_codes.GENERAL_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Found more than 1 files" in captured.err
        assert "report-final.txt" in captured.err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from blobdrive.cli import app as app_module

        def _interrupt() -> int:
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, "main", _interrupt)
        assert self._run(monkeypatch, []) == exit_codes.KEYBOARD_INTERRUPT

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        from blobdrive.cli import app as app_module

        def _crash() -> int:
            raise RuntimeError("boom")

        monkeypatch.setattr(app_module, "main", _crash)
        assert self._run(monkeypatch, []) == exit_codes.UNEXPECTED_ERROR
        assert "RuntimeError" in capsys.readouterr().err

    def test_invalid_configuration(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("BLOBDRIVE_BACKEND", "ftp")
        assert self._run(monkeypatch, ["ls"]) == exit_codes.GENERAL_ERROR
        assert "Unknown storage backend" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Local backend, end to end
# ---------------------------------------------------------------------------

class TestLocalBackend:
    @pytest.fixture(autouse=True)
    def _local_backend(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("BLOBDRIVE_BACKEND", "local")
        monkeypatch.setenv("BLOBDRIVE_LOCAL_ROOT", str(tmp_path / "store"))

    def test_upload_list_download_remove(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        source = tmp_path / "diary.txt"
        source.write_bytes(b"dear diary")

        main(["up", str(source)])
        object_id = capsys.readouterr().out.strip()

        main(["ls", "-d", "id", "name"])
        assert _stdout_lines(capsys) == [f"{object_id}  diary.txt"]

        output = tmp_path / "copy.txt"
        main(["dl", "diary", "-o", str(output)])
        assert output.read_bytes() == b"dear diary"

        main(["rm", "diary"])
        assert _stdout_lines(capsys) == [object_id]

        main(["ls"])
        assert capsys.readouterr().out == ""
