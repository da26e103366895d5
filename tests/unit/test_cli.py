"""
命令行单元测试

通过 typer 的 CliRunner 调用各个命令。
"""

import json
import zipfile

import pytest
from ruamel.yaml import YAML
from typer.testing import CliRunner

from fmpack import __version__
from fmpack.cli.main import app
from fmpack.pack.target import INSTALL_DIR_ENV


runner = CliRunner()


@pytest.fixture
def mod_source(tmp_path):
    """创建一个 mod 源码目录"""
    source = tmp_path / "foo"
    source.mkdir()
    (source / "info.json").write_text(json.dumps({"name": "foo", "version": "2.0.0", "title": "Foo"}))
    (source / "control.lua").write_text("-- control")
    (source / "docs").mkdir()
    (source / "docs" / "README.md").write_text("# Foo")
    return source


@pytest.fixture
def install_dir(tmp_path):
    """创建安装目录"""
    mods = tmp_path / "mods"
    mods.mkdir()
    return mods


def _names(archive):
    with zipfile.ZipFile(archive) as zf:
        return zf.namelist()


class TestPackCommand:
    """pack 命令测试"""

    def test_pack(self, mod_source, install_dir):
        """测试基本打包"""
        result = runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir)])

        assert result.exit_code == 0, result.output
        archive = install_dir / "foo_2.0.0.zip"
        assert archive.is_file()
        names = _names(archive)
        assert names[0] == "foo_2.0.0/"
        assert "foo_2.0.0/control.lua" in names

    def test_install_dir_from_environment(self, mod_source, install_dir):
        """测试从环境变量读取安装目录"""
        result = runner.invoke(app, ["pack", "-s", str(mod_source)], env={INSTALL_DIR_ENV: str(install_dir)})

        assert result.exit_code == 0, result.output
        assert (install_dir / "foo_2.0.0.zip").is_file()

    def test_exclude_option(self, mod_source, install_dir):
        """测试命令行排除项"""
        result = runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir), "-e", "docs"])

        assert result.exit_code == 0, result.output
        names = _names(install_dir / "foo_2.0.0.zip")
        assert not any(name.startswith("foo_2.0.0/docs") for name in names)

    def test_config_file(self, mod_source, install_dir):
        """测试 fmpack.yaml 中的配置生效，且配置文件本身不被打包"""
        yaml = YAML()
        with open(mod_source / "fmpack.yaml", "w", encoding="utf-8") as f:
            yaml.dump({"install_dir": str(install_dir), "exclude": ["docs"]}, f)

        result = runner.invoke(app, ["pack", "-s", str(mod_source)], env={INSTALL_DIR_ENV: ""})

        assert result.exit_code == 0, result.output
        names = _names(install_dir / "foo_2.0.0.zip")
        assert "foo_2.0.0/fmpack.yaml" not in names
        assert not any(name.startswith("foo_2.0.0/docs") for name in names)

    def test_old_versions_removed(self, mod_source, install_dir):
        """测试默认删除旧版本"""
        (install_dir / "foo_1.0.0.zip").write_bytes(b"old")

        result = runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir)])

        assert result.exit_code == 0, result.output
        assert not (install_dir / "foo_1.0.0.zip").exists()

    def test_no_clean(self, mod_source, install_dir):
        """测试 --no-clean 保留旧版本"""
        (install_dir / "foo_1.0.0.zip").write_bytes(b"old")

        result = runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir), "--no-clean"])

        assert result.exit_code == 0, result.output
        assert (install_dir / "foo_1.0.0.zip").exists()
        assert (install_dir / "foo_2.0.0.zip").exists()

    def test_stored(self, mod_source, install_dir):
        """测试 --stored 不压缩"""
        result = runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir), "--stored"])

        assert result.exit_code == 0, result.output
        with zipfile.ZipFile(install_dir / "foo_2.0.0.zip") as zf:
            assert zf.getinfo("foo_2.0.0/control.lua").compress_type == zipfile.ZIP_STORED

    def test_invalid_level(self, mod_source, install_dir):
        """测试压缩级别超出范围"""
        result = runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir), "-l", "12"])

        assert result.exit_code != 0
        assert not (install_dir / "foo_2.0.0.zip").exists()

    def test_missing_info_json(self, tmp_path, install_dir):
        """测试缺少 info.json"""
        source = tmp_path / "empty"
        source.mkdir()

        result = runner.invoke(app, ["pack", "-s", str(source), "-i", str(install_dir)])

        assert result.exit_code == 1
        assert list(install_dir.iterdir()) == []

    def test_missing_install_dir(self, mod_source, tmp_path):
        """测试安装目录不存在"""
        missing = tmp_path / "missing"

        result = runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(missing)])

        assert result.exit_code == 1
        assert not missing.exists()


class TestValidateCommand:
    """validate 命令测试"""

    def test_valid(self, mod_source):
        """测试验证通过"""
        result = runner.invoke(app, ["validate", "-s", str(mod_source)])

        assert result.exit_code == 0, result.output

    def test_invalid(self, tmp_path):
        """测试验证失败"""
        (tmp_path / "info.json").write_text(json.dumps({"name": "foo"}))

        result = runner.invoke(app, ["validate", "-s", str(tmp_path)])

        assert result.exit_code == 1

    def test_json_output(self, tmp_path):
        """测试 JSON 格式输出"""
        (tmp_path / "info.json").write_text(json.dumps({"name": "foo"}))

        result = runner.invoke(app, ["validate", "-s", str(tmp_path), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error_count"] == len(data["errors"]) >= 1
        assert data["errors"][0]["loc"][0] == "info.json"


class TestInspectCommand:
    """inspect 命令测试"""

    def test_inspect_json(self, mod_source, install_dir):
        """测试以 JSON 查看归档"""
        runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir)])

        result = runner.invoke(app, ["inspect", str(install_dir / "foo_2.0.0.zip"), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["roots"] == ["foo_2.0.0"]
        assert data["info"]["name"] == "foo"
        assert "foo_2.0.0/info.json" in [entry["path"] for entry in data["entries"]]

    def test_inspect_table(self, mod_source, install_dir):
        """测试表格输出"""
        runner.invoke(app, ["pack", "-s", str(mod_source), "-i", str(install_dir)])

        result = runner.invoke(app, ["inspect", str(install_dir / "foo_2.0.0.zip"), "--files"])

        assert result.exit_code == 0, result.output

    def test_missing_archive(self, tmp_path):
        """测试归档不存在"""
        result = runner.invoke(app, ["inspect", str(tmp_path / "missing.zip")])

        assert result.exit_code == 1

    def test_not_a_zip(self, tmp_path):
        """测试文件不是 zip"""
        bogus = tmp_path / "foo_1.0.0.zip"
        bogus.write_bytes(b"not a zip")

        result = runner.invoke(app, ["inspect", str(bogus)])

        assert result.exit_code == 1


class TestMainCommands:
    """主程序测试"""

    def test_version(self):
        """测试 --version"""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info(self):
        """测试 info 命令"""
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0, result.output
