"""zip 安全解压测试"""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from vendordeps.core.exceptions import ArchiveError, ZipSecurityError
from vendordeps.utils.archive import enclosed_parts, extract_zip


def _all_files(root: Path) -> list[Path]:
    return sorted(p for p in root.rglob("*") if p.is_file())


class TestExtract:
    def test_nested_members(self, tmp_path: Path, make_zip) -> None:
        data = make_zip({
            "ctre/phoenix6/CANcoder.hpp": b"#pragma once",
            "ctre/phoenix6/TalonFX.hpp": b"#pragma once",
            "README.txt": b"hi",
        })
        out = tmp_path / "include"
        written = extract_zip(io.BytesIO(data), out)

        assert (out / "ctre/phoenix6/CANcoder.hpp").read_bytes() == b"#pragma once"
        assert [p.name for p in written] == ["CANcoder.hpp", "TalonFX.hpp", "README.txt"]
        for p in written:
            assert p.is_relative_to(out.resolve())

    def test_directory_entries_skipped(self, tmp_path: Path, make_zip) -> None:
        data = make_zip({"linux/": b"", "linux/x86-64/": b"", "linux/x86-64/shared/libhal.so": b"\x7fELF"})
        out = tmp_path / "libs"
        written = extract_zip(io.BytesIO(data), out)
        assert written == [(out / "linux/x86-64/shared/libhal.so").resolve()]

    def test_backslash_directory_entries_skipped(self, tmp_path: Path, make_zip) -> None:
        data = make_zip({"inc\\": b"", "inc\\a.h": b"#pragma once"})
        out = tmp_path / "include"
        written = extract_zip(io.BytesIO(data), out)
        assert written == [(out / "inc" / "a.h").resolve()]
        assert (out / "inc").is_dir()

    def test_inner_parent_reference_allowed(self, tmp_path: Path, make_zip) -> None:
        data = make_zip({"a/../b.txt": b"ok"})
        extract_zip(io.BytesIO(data), tmp_path / "out")
        assert (tmp_path / "out" / "b.txt").read_bytes() == b"ok"

    def test_traversal_rejected(self, tmp_path: Path, make_zip) -> None:
        data = make_zip({"../evil.txt": b"pwned"})
        out = tmp_path / "sandbox" / "out"
        with pytest.raises(ZipSecurityError) as exc_info:
            extract_zip(io.BytesIO(data), out)
        assert exc_info.value.member == "../evil.txt"
        assert not list(tmp_path.rglob("evil.txt"))

    def test_absolute_rejected(self, tmp_path: Path, make_zip) -> None:
        data = make_zip({"/abs.txt": b"pwned"})
        with pytest.raises(ZipSecurityError):
            extract_zip(io.BytesIO(data), tmp_path / "out")

    def test_nothing_written_when_any_member_unsafe(self, tmp_path: Path, make_zip) -> None:
        data = make_zip({"good/first.txt": b"1", "good/../../escape.txt": b"2"})
        out = tmp_path / "out"
        with pytest.raises(ZipSecurityError):
            extract_zip(io.BytesIO(data), out)
        assert _all_files(tmp_path) == []

    def test_symlink_escape_rejected(self, tmp_path: Path, make_zip) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        out = tmp_path / "out"
        out.mkdir()
        (out / "link").symlink_to(outside, target_is_directory=True)

        data = make_zip({"link/evil.txt": b"pwned"})
        with pytest.raises(ZipSecurityError):
            extract_zip(io.BytesIO(data), out)
        assert not (outside / "evil.txt").exists()

    def test_not_a_zip(self, tmp_path: Path) -> None:
        with pytest.raises(ArchiveError, match="不是合法的 zip"):
            extract_zip(io.BytesIO(b"<html>404</html>"), tmp_path / "out")

    def test_overwrites_existing(self, tmp_path: Path, make_zip) -> None:
        out = tmp_path / "out"
        extract_zip(io.BytesIO(make_zip({"f.txt": b"old"})), out)
        extract_zip(io.BytesIO(make_zip({"f.txt": b"new"})), out)
        assert (out / "f.txt").read_bytes() == b"new"


class TestEnclosedParts:
    @pytest.mark.parametrize(("name", "parts"), [
        ("a/b/c.h", ("a", "b", "c.h")),
        ("./a/./b.h", ("a", "b.h")),
        ("a/../b.h", ("b.h",)),
        ("a\\b.h", ("a", "b.h")),
    ])
    def test_normalized(self, name: str, parts: tuple[str, ...]) -> None:
        assert enclosed_parts(name) == parts

    @pytest.mark.parametrize("name", [
        "../x", "a/../../x", "/etc/passwd", "C:/Windows/x.dll", "..\\x", "a\x00b",
    ])
    def test_unsafe(self, name: str) -> None:
        with pytest.raises(ZipSecurityError):
            enclosed_parts(name)
