"""
安装目录解析单元测试
"""

import sys
from pathlib import Path

import pytest

from fmpack.pack.pack_context import TargetNotFoundError
from fmpack.pack.target import INSTALL_DIR_ENV, default_install_dir, resolve_install_dir


class TestDefaultInstallDir:
    """平台默认目录测试"""

    def test_linux(self, tmp_path):
        """测试 Linux 默认目录"""
        assert default_install_dir("linux", {}, tmp_path) == tmp_path / ".factorio" / "mods"

    def test_windows_uses_appdata(self, tmp_path):
        """测试 Windows 使用 APPDATA"""
        environ = {"APPDATA": str(tmp_path / "Roaming")}
        assert default_install_dir("win32", environ, tmp_path) == tmp_path / "Roaming" / "Factorio" / "mods"

    def test_windows_without_appdata(self, tmp_path):
        """测试缺少 APPDATA 时回退到用户目录"""
        expected = tmp_path / "AppData" / "Roaming" / "Factorio" / "mods"
        assert default_install_dir("win32", {}, tmp_path) == expected

    def test_macos(self, tmp_path):
        """测试 macOS 默认目录"""
        expected = tmp_path / "Library" / "Application Support" / "factorio" / "mods"
        assert default_install_dir("darwin", {}, tmp_path) == expected

    def test_unknown_platform_falls_back_to_cwd(self, tmp_path):
        """测试未知平台回退到当前目录"""
        assert default_install_dir("sunos5", {}, tmp_path) == Path(".")


class TestResolveInstallDir:
    """resolve_install_dir 测试"""

    def test_override_wins(self, tmp_path):
        """测试显式指定优先于环境变量"""
        flag_dir = tmp_path / "flag"
        env_dir = tmp_path / "env"
        flag_dir.mkdir()
        env_dir.mkdir()

        resolved = resolve_install_dir(flag_dir, environ={INSTALL_DIR_ENV: str(env_dir)})

        assert resolved == flag_dir

    def test_environment_variable(self, tmp_path):
        """测试环境变量"""
        env_dir = tmp_path / "env"
        env_dir.mkdir()

        resolved = resolve_install_dir(environ={INSTALL_DIR_ENV: str(env_dir)})

        assert resolved == env_dir

    def test_environment_beats_config(self, tmp_path):
        """测试环境变量优先于配置文件"""
        env_dir = tmp_path / "env"
        config_dir = tmp_path / "config"
        env_dir.mkdir()
        config_dir.mkdir()

        resolved = resolve_install_dir(
            configured=config_dir,
            environ={INSTALL_DIR_ENV: str(env_dir)},
        )

        assert resolved == env_dir

    def test_config_used_without_environment(self, tmp_path):
        """测试配置文件中的安装目录"""
        config_dir = tmp_path / "config"
        config_dir.mkdir()

        assert resolve_install_dir(configured=config_dir, environ={}) == config_dir

    def test_platform_default(self, tmp_path):
        """测试平台默认目录"""
        mods = tmp_path / ".factorio" / "mods"
        mods.mkdir(parents=True)

        assert resolve_install_dir(environ={}, platform="linux", home=tmp_path) == mods

    def test_missing_directory_is_fatal_and_not_created(self, tmp_path):
        """测试目录不存在时失败，且不会自动创建"""
        missing = tmp_path / "missing"

        with pytest.raises(TargetNotFoundError):
            resolve_install_dir(missing, environ={})

        assert not missing.exists()

    def test_missing_default_is_fatal(self, tmp_path):
        """测试平台默认目录不存在时失败"""
        with pytest.raises(TargetNotFoundError):
            resolve_install_dir(environ={}, platform="linux", home=tmp_path)

    def test_file_is_rejected(self, tmp_path):
        """测试路径是文件时失败"""
        not_a_dir = tmp_path / "mods"
        not_a_dir.write_text("")

        with pytest.raises(TargetNotFoundError):
            resolve_install_dir(not_a_dir, environ={})

    def test_empty_environment_value_ignored(self, tmp_path):
        """测试空的环境变量被忽略"""
        mods = tmp_path / ".factorio" / "mods"
        mods.mkdir(parents=True)

        resolved = resolve_install_dir(environ={INSTALL_DIR_ENV: ""}, platform="linux", home=tmp_path)

        assert resolved == mods

    @pytest.mark.skipif(sys.platform == "win32", reason="依赖 HOME 环境变量")
    def test_user_directory_expanded(self, tmp_path, monkeypatch):
        """测试 ~ 被展开"""
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "mods").mkdir()

        assert resolve_install_dir("~/mods", environ={}) == tmp_path / "mods"
