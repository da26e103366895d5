"""
旧版本清理单元测试
"""

import os
from pathlib import Path

import pytest

from fmpack.pack.janitor import (
    PurgeResult,
    find_stale,
    purge_output,
    purge_stale,
    stale_glob,
    stale_pattern,
)
from fmpack.pack.pack_context import PurgeError


class TestStalePattern:
    """匹配模式测试"""

    def test_pattern_shape(self):
        """测试模式格式"""
        assert stale_pattern("foo") == "foo_*[0-9].*[0-9].*[0-9].zip"

    def test_glob_includes_target(self, tmp_path):
        """测试完整 glob 包含安装目录"""
        pattern = stale_glob(tmp_path, "foo")
        assert pattern.startswith(str(tmp_path))
        assert pattern.endswith(os.sep + "foo_*[0-9].*[0-9].*[0-9].zip")

    def test_metacharacters_escaped(self):
        """测试 mod 名称中的元字符按字面匹配"""
        assert stale_pattern("m[1]") == "m[[]1]_*[0-9].*[0-9].*[0-9].zip"


class TestFindStale:
    """find_stale 测试"""

    def test_only_version_shaped_names(self, tmp_path):
        """测试只匹配三段式版本号"""
        for name in ["foo_1.0.0.zip", "foo_10.20.30.zip", "foo_1.0.zip",
                     "foo_latest.zip", "foo_1.0.0.tar", "foo1.0.0.zip"]:
            (tmp_path / name).write_bytes(b"")

        matches = [path.name for path in find_stale(tmp_path, "foo")]

        assert matches == ["foo_1.0.0.zip", "foo_10.20.30.zip"]

    def test_missing_target_is_fatal(self, tmp_path):
        """测试无法枚举安装目录时报错"""
        with pytest.raises(PurgeError):
            find_stale(tmp_path / "missing", "foo")


class TestPurgeStale:
    """purge_stale 测试"""

    def test_removes_all_versions_of_mod(self, tmp_path):
        """测试删除同名 mod 的所有版本，不影响其它 mod"""
        (tmp_path / "foo_1.0.0.zip").write_bytes(b"old")
        (tmp_path / "foo_1.2.3.zip").write_bytes(b"old")
        (tmp_path / "bar_1.0.0.zip").write_bytes(b"other")

        result = purge_stale(tmp_path, "foo")

        assert isinstance(result, PurgeResult)
        assert sorted(path.name for path in result.removed) == ["foo_1.0.0.zip", "foo_1.2.3.zip"]
        assert result.skipped == []
        assert sorted(path.name for path in tmp_path.iterdir()) == ["bar_1.0.0.zip"]

    def test_current_version_also_removed(self, tmp_path):
        """测试相同版本号的归档同样会被删除"""
        (tmp_path / "foo_2.0.0.zip").write_bytes(b"same")

        result = purge_stale(tmp_path, "foo")

        assert [path.name for path in result.removed] == ["foo_2.0.0.zip"]

    def test_directory_match_is_skipped(self, tmp_path):
        """测试匹配项不是普通文件时跳过"""
        (tmp_path / "foo_1.0.0.zip").mkdir()
        (tmp_path / "foo_1.1.0.zip").write_bytes(b"old")

        result = purge_stale(tmp_path, "foo")

        assert [path.name for path in result.skipped] == ["foo_1.0.0.zip"]
        assert [path.name for path in result.removed] == ["foo_1.1.0.zip"]
        assert (tmp_path / "foo_1.0.0.zip").is_dir()

    def test_literal_metacharacters(self, tmp_path):
        """测试名称含元字符的 mod 只匹配自身"""
        (tmp_path / "m[1]_1.0.0.zip").write_bytes(b"")
        (tmp_path / "m1_1.0.0.zip").write_bytes(b"")

        result = purge_stale(tmp_path, "m[1]")

        assert [path.name for path in result.removed] == ["m[1]_1.0.0.zip"]
        assert (tmp_path / "m1_1.0.0.zip").exists()

    def test_nothing_to_remove(self, tmp_path):
        """测试没有旧版本"""
        result = purge_stale(tmp_path, "foo")

        assert result.removed == []
        assert result.skipped == []


class TestPurgeOutput:
    """purge_output 测试"""

    def test_missing_output(self, tmp_path):
        """测试输出路径不存在"""
        assert purge_output(tmp_path / "foo_1.0.0.zip") is False

    def test_existing_file_removed(self, tmp_path):
        """测试删除已存在的文件"""
        output = tmp_path / "foo_1.0.0.zip"
        output.write_bytes(b"old")

        assert purge_output(output) is True
        assert not output.exists()

    def test_empty_directory_removed(self, tmp_path):
        """测试输出路径是空目录时删除"""
        output = tmp_path / "foo_1.0.0.zip"
        output.mkdir()

        assert purge_output(output) is True
        assert not output.exists()

    def test_non_empty_directory_is_fatal(self, tmp_path):
        """测试输出路径是非空目录时失败"""
        output = tmp_path / "foo_1.0.0.zip"
        output.mkdir()
        (output / "inner").write_text("x")

        with pytest.raises(PurgeError):
            purge_output(output)

        assert output.is_dir()
