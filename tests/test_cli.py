"""test suite for the command line interface."""
import pytest
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from typer.testing import CliRunner

from podsmith.cli.main import app


runner = CliRunner()


def write_podspec(repo: Path, name: str, version: str, body: str = "") -> Path:
    path = repo / name / version / f"{name}.podspec"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'name "{name}"\nversion "{version}"\n{body}')
    return path


@pytest.fixture
def project(tmp_path):
    source = tmp_path / "sources" / "JSONKit"
    source.mkdir(parents=True)
    (source / "JSONKit.m").write_text("")

    repo = tmp_path / "Specs"
    write_podspec(repo, "JSONKit", "1.4", (
        'summary "A fast JSON parser."\n'
        f'source path = "{source}"\n'
        'source_files "*.m"\n'
    ))
    write_podspec(repo, "JSONKit", "1.5", f'source path = "{source}"\n')

    podfile = tmp_path / "Podfile"
    podfile.write_text('dependency "JSONKit", "~> 1.4.0"\n')
    return tmp_path


class TestInstallCommand:
    def test_install(self, project):
        result = runner.invoke(app, [
            "install", str(project / "Podfile"),
            "--build-root", str(project / "Pods"),
            "--repo-dir", str(project / "Specs"),
            "--jobs", "1",
        ])

        assert result.exit_code == 0, result.output
        assert "Installing: JSONKit (1.4)" in result.output
        assert (project / "Pods" / "Pods.xcconfig").is_file()
        assert (project / "Pods" / "JSONKit-1.4" / "JSONKit.m").is_file()

    def test_missing_podfile(self, project):
        result = runner.invoke(app, [
            "install", str(project / "Missing"),
            "--repo-dir", str(project / "Specs"),
        ])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unsatisfiable(self, project):
        (project / "Podfile").write_text('dependency "JSONKit", "> 2.0"\n')
        result = runner.invoke(app, [
            "install", str(project / "Podfile"),
            "--build-root", str(project / "Pods"),
            "--repo-dir", str(project / "Specs"),
        ])
        assert result.exit_code == 1
        assert not (project / "Pods").exists()


class TestResolveCommand:
    def test_resolve(self, project):
        result = runner.invoke(app, [
            "resolve", str(project / "Podfile"),
            "--repo-dir", str(project / "Specs"),
        ])
        assert result.exit_code == 0, result.output
        assert "JSONKit" in result.output
        assert "1.4" in result.output
        assert not (project / "Pods").exists()


class TestInfoCommand:
    def test_info(self, project):
        result = runner.invoke(app, ["info", "JSONKit", "--repo-dir", str(project / "Specs")])
        assert result.exit_code == 0, result.output
        assert "1.5" in result.output

    def test_unknown_pod(self, project):
        result = runner.invoke(app, ["info", "Nope", "--repo-dir", str(project / "Specs")])
        assert result.exit_code == 1


class TestConfigCommand:
    def test_set_known_key(self):
        with patch("podsmith.cli.main.set_config_value") as set_value:
            result = runner.invoke(app, ["config", "PODSMITH_JOBS", "8"])
        assert result.exit_code == 0
        set_value.assert_called_once_with("PODSMITH_JOBS", "8")

    def test_unknown_key(self):
        with patch("podsmith.cli.main.set_config_value") as set_value:
            result = runner.invoke(app, ["config", "SOMETHING_ELSE", "1"])
        assert result.exit_code == 1
        set_value.assert_not_called()


class TestCacheCommand:
    def test_invalid_action(self):
        result = runner.invoke(app, ["cache", "explode"])
        assert result.exit_code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
