"""Tests for destination path construction and collision resolution."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

from tagstash.ingest.paths import build_final_path, extension_of, fallback_stem
from tagstash.ingest.tokens import Hashtag, Text


NOW = dt.datetime(2024, 3, 7, 9, 5, 2)


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")


def test_non_existing_file(tmp_path: Path) -> None:
    result = build_final_path(tmp_path, [Text("non_existing_file")], "non_existing_file", NOW)
    assert result == tmp_path / "non_existing_file"


def test_hashtags_become_nested_directories(tmp_path: Path) -> None:
    tokens = [Hashtag("a"), Hashtag("b"), Text("c")]
    assert build_final_path(tmp_path, tokens, "f.png", NOW) == tmp_path / "a" / "b" / "c.png"


def test_hashtags_after_text_still_build_directories(tmp_path: Path) -> None:
    tokens = [Text("name"), Hashtag("late"), Text("ignored")]
    assert build_final_path(tmp_path, tokens, "f.jpg", NOW) == tmp_path / "late" / "name.jpg"


def test_no_text_token_uses_timestamp(tmp_path: Path) -> None:
    result = build_final_path(tmp_path, [Hashtag("x")], "f", NOW)
    assert result == tmp_path / "x" / "file_2024-03-07_09-05-02"


def test_timestamp_keeps_caller_timezone(tmp_path: Path) -> None:
    aware = dt.datetime(2024, 12, 31, 23, 59, 59, tzinfo=dt.timezone(dt.timedelta(hours=5)))
    result = build_final_path(tmp_path, [], "f.jpg", aware)
    assert result == tmp_path / "file_2024-12-31_23-59-59.jpg"


def test_extension_case_is_preserved(tmp_path: Path) -> None:
    result = build_final_path(tmp_path, [Text("name")], "orig.JPEG", NOW)
    assert result.name == "name.JPEG"


def test_extension_comes_from_last_component(tmp_path: Path) -> None:
    assert extension_of("photos/file_12.jpg") == "jpg"
    assert extension_of("https://api.telegram.org/file/bot1:abc/stickers/file_3.webp") == "webp"
    assert extension_of("dir.with.dots/file") is None
    assert extension_of("archive.tar.gz") == "gz"
    assert extension_of("noext") is None


def test_fallback_stem_is_zero_padded() -> None:
    assert fallback_stem(dt.datetime(2024, 1, 2, 3, 4, 5)) == "file_2024-01-02_03-04-05"


def test_file_without_extension_collides(tmp_path: Path) -> None:
    _touch(tmp_path / "file_without_extension")
    result = build_final_path(
        tmp_path, [Text("file_without_extension")], "file_without_extension", NOW
    )
    assert result == tmp_path / "file_without_extension_1"


def test_file_with_extension_skips_taken_suffixes(tmp_path: Path) -> None:
    _touch(tmp_path / "file_with_extension.txt")
    _touch(tmp_path / "file_with_extension_1.txt")
    result = build_final_path(tmp_path, [Text("file_with_extension")], "x.txt", NOW)
    assert result == tmp_path / "file_with_extension_2.txt"


def test_collision_result_differs_and_is_free(tmp_path: Path) -> None:
    naive = tmp_path / "pets" / "my.jpg"
    _touch(naive)
    result = build_final_path(tmp_path, [Hashtag("pets"), Text("my")], "a.jpg", NOW)
    assert result != naive
    assert not result.exists()
    assert result.parent == naive.parent


def test_same_state_gives_same_path(tmp_path: Path) -> None:
    _touch(tmp_path / "dup.png")
    tokens = [Text("dup")]
    first = build_final_path(tmp_path, tokens, "f.png", NOW)
    second = build_final_path(tmp_path, tokens, "f.png", NOW)
    assert first == second == tmp_path / "dup_1.png"


def test_accepts_string_root(tmp_path: Path) -> None:
    result = build_final_path(str(tmp_path), [Text("s")], "f.gif", NOW)
    assert result == tmp_path / "s.gif"
