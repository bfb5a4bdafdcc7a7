"""End-to-end tests for the WorkingDirectory context."""

import asyncio
import base64
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from workdir import FileInfo, WorkingDirectory, listing_payload
from workdir.config import ConfigError, WorkdirConfig, resolve_with_precedence


def _working(root: Path, **overrides: object) -> WorkingDirectory:
    config = resolve_with_precedence(defaults=WorkdirConfig(), cli_overrides=overrides)
    return WorkingDirectory.from_config(root, config)


def test_from_config_applies_session_settings(tmp_path: Path) -> None:
    working = _working(
        tmp_path,
        **{"session.text_file_size_limit": 10, "session.max_concurrency": 2},
    )

    assert working.root == tmp_path.resolve()
    assert working.text_size_limit == 10
    assert working.max_concurrency == 2


def test_context_is_immutable(tmp_path: Path) -> None:
    working = WorkingDirectory(tmp_path, text_size_limit=10)

    with pytest.raises(FrozenInstanceError):
        working.text_size_limit = 20  # type: ignore[misc]


def test_listing_payload_matches_example(tmp_path: Path) -> None:
    (tmp_path / ".hidden").write_bytes(b"secret")
    (tmp_path / "notes.txt").write_bytes(b"line1\r\nline2")
    (tmp_path / "huge.txt").write_bytes(b"x" * 200)
    (tmp_path / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    working = _working(tmp_path, **{"session.text_file_size_limit": 20})

    payload = listing_payload(asyncio.run(working.list_all()))

    assert payload == {
        "notes.txt": {"isText": True, "content": base64.b64encode(b"line1\nline2").decode()},
        "huge.txt": {"isText": True},
        "image.png": {"isText": False},
    }


def test_get_file_info(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("hi", encoding="utf-8")
    working = WorkingDirectory(tmp_path, text_size_limit=100)

    info = asyncio.run(working.get_file_info("a.txt"))

    assert info == FileInfo(filename="a.txt", is_text=True, content="aGk=")
    assert asyncio.run(working.get_file_info(".env")) is None


def test_save_rename_read_delete_cycle(tmp_path: Path) -> None:
    working = WorkingDirectory(tmp_path, text_size_limit=100)

    async def _cycle() -> tuple[str, str]:
        await working.save_file("draft.txt", b"v1")
        await working.save_file("draft.txt", b"v2")
        await working.rename_file("draft.txt", "final.txt")
        result = await working.read_binary("final.txt")
        await working.delete_file("final.txt")
        return result

    data, mime_type = asyncio.run(_cycle())

    assert base64.b64decode(data) == b"v2"
    assert mime_type == "text/plain"
    assert list(tmp_path.iterdir()) == []


def test_extra_mime_types_change_classification(tmp_path: Path) -> None:
    (tmp_path / "report.lst").write_text("hello", encoding="utf-8")

    plain = _working(tmp_path)
    custom = _working(tmp_path, **{"mime.extra_types": {".lst": "text/x-listing"}})

    assert asyncio.run(plain.get_file_info("report.lst")).is_text is False  # type: ignore[union-attr]
    assert asyncio.run(custom.get_file_info("report.lst")).is_text is True  # type: ignore[union-attr]


def test_missing_types_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        _working(tmp_path, **{"mime.types_file": str(tmp_path / "absent.types")})


def test_facade_operations_are_documented() -> None:
    names = ["classifier", "list_all", "get_file_info", "save_file", "rename_file"]
    for name in [*names, "delete_file", "read_binary"]:
        assert getattr(WorkingDirectory, name).__doc__, name
