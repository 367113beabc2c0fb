"""
End-to-end tests for the CLI commands.

Each test runs the real CLI against an isolated home directory; installed
versions are seeded directly into the registry except for the install
command itself, which is served by `responses`.
"""

import hashlib
import io
import json
import os
import sys
from datetime import datetime, timezone

import pytest
import responses

from binarius.cli.parser import CLI
from binarius.core.platform import PlatformInfo
from binarius.core.registry import ToolVersion, load_registry, save_registry
from tests.fixtures.archives import TERRAFORM_BINARY, make_zip

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="activation links are POSIX symlinks"
)


def run_cli(*argv) -> int:
    return CLI().run(list(argv))


@pytest.fixture
def seed(isolated_home):
    """Register installed versions without downloading anything."""

    def _seed(tool_name, *versions):
        registry_path = isolated_home / "installation.json"
        registry = load_registry(registry_path)
        for version in versions:
            binary = isolated_home / "tools" / tool_name / version / tool_name
            binary.parent.mkdir(parents=True, exist_ok=True)
            binary.write_bytes(TERRAFORM_BINARY)
            registry.add_version(
                tool_name,
                version,
                ToolVersion(
                    tool_name=tool_name,
                    version=version,
                    binary_path=str(binary),
                    installed_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
                    size_bytes=2048,
                    source_url=f"https://example.com/{tool_name}_{version}.zip",
                    checksum="c" * 64,
                    architecture="linux/amd64",
                ),
            )
        save_registry(registry, registry_path)

    return _seed


class TestInit:
    """Test 'binarius init'."""

    def test_creates_layout(self, isolated_home, tmp_path, capsys):
        assert run_cli("init") == 0

        assert (isolated_home / "tools").is_dir()
        assert (isolated_home / "cache").is_dir()
        assert (tmp_path / "bin").is_dir()
        assert (isolated_home / "config.yaml").exists()
        assert json.loads((isolated_home / "installation.json").read_text()) == {}

        out = capsys.readouterr().out
        assert "is not in your PATH" in out
        assert "initialized successfully" in out

    def test_path_detected(self, isolated_home, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("PATH", f"{tmp_path / 'bin'}{os.pathsep}/usr/bin")

        run_cli("init")

        assert "is in your PATH" in capsys.readouterr().out

    def test_keeps_existing_files(self, isolated_home, seed, capsys):
        seed("terraform", "v1.6.0")
        run_cli("init")
        config = isolated_home / "config.yaml"
        config.write_text("defaults:\n  terraform: v1.6.0\n")

        assert run_cli("init") == 0

        assert config.read_text() == "defaults:\n  terraform: v1.6.0\n"
        assert load_registry(isolated_home / "installation.json").list_tools() == ["terraform"]

    def test_force_rewrites_config(self, isolated_home):
        run_cli("init")
        config = isolated_home / "config.yaml"
        config.write_text("defaults:\n  terraform: v1.6.0\n")

        run_cli("init", "--force")

        assert "terraform" not in config.read_text()


class TestInstallCommand:
    """Test 'binarius install'."""

    @responses.activate
    def test_install(self, isolated_home, monkeypatch, capsys):
        monkeypatch.setattr(
            "binarius.toolchain.installer.detect_platform",
            lambda: PlatformInfo("linux", "amd64"),
        )
        archive = make_zip({"terraform": TERRAFORM_BINARY})
        base = "https://releases.hashicorp.com/terraform/1.6.0"
        responses.add(responses.GET, f"{base}/terraform_1.6.0_linux_amd64.zip", body=archive)
        responses.add(
            responses.GET,
            f"{base}/terraform_1.6.0_SHA256SUMS",
            body=f"{hashlib.sha256(archive).hexdigest()}  terraform_1.6.0_linux_amd64.zip\n",
        )

        assert run_cli("--quiet", "install", "terraform@1.6.0") == 0

        out = capsys.readouterr().out
        assert "Successfully installed terraform@v1.6.0" in out
        assert "binarius use terraform@v1.6.0" in out
        assert load_registry(isolated_home / "installation.json").is_installed(
            "terraform", "v1.6.0"
        )

        assert run_cli("install", "terraform@v1.6.0") == 0
        assert "already installed" in capsys.readouterr().out

    def test_unknown_tool(self, isolated_home, capsys):
        assert run_cli("install", "pulumi@v1.0.0") == 1
        assert "Supported tools: terraform, terragrunt, tofu" in capsys.readouterr().err

    def test_invalid_version(self, isolated_home, capsys):
        assert run_cli("install", "terraform@1.6") == 1
        assert "semantic versioning" in capsys.readouterr().err


class TestUseAndList:
    """Test 'binarius use', 'binarius list' and 'binarius info'."""

    def test_use(self, isolated_home, tmp_path, seed, capsys):
        seed("terraform", "v1.5.7", "v1.6.0")

        assert run_cli("use", "terraform@1.5.7") == 0

        link = tmp_path / "bin" / "terraform"
        assert os.readlink(link) == str(
            isolated_home / "tools" / "terraform" / "v1.5.7" / "terraform"
        )
        assert "Activated terraform@v1.5.7" in capsys.readouterr().out

    def test_use_not_installed(self, isolated_home, seed, capsys):
        seed("terraform", "v1.6.0")

        assert run_cli("use", "terraform@v2.0.0") == 1
        assert "terraform@v2.0.0 is not installed" in capsys.readouterr().err

    def test_list_empty(self, isolated_home, capsys):
        assert run_cli("list") == 0
        assert "No tools installed" in capsys.readouterr().out

    def test_list_marks_active(self, isolated_home, seed, capsys):
        seed("terraform", "v1.5.7", "v1.6.0")
        seed("tofu", "v1.6.0")
        run_cli("use", "terraform@v1.6.0")
        capsys.readouterr()

        assert run_cli("list") == 0

        out = capsys.readouterr().out
        assert "terraform:\n  * v1.6.0\n    v1.5.7\n" in out
        assert "tofu:\n    v1.6.0\n" in out
        assert "* = Active version" in out

    def test_list_one_tool(self, isolated_home, seed, capsys):
        seed("terraform", "v1.6.0")

        assert run_cli("list", "tofu") == 0
        assert "No versions of tofu are installed" in capsys.readouterr().out

    def test_info(self, isolated_home, seed, capsys):
        seed("terraform", "v1.6.0")
        run_cli("use", "terraform@v1.6.0")
        capsys.readouterr()

        assert run_cli("info", "terraform") == 0

        captured = capsys.readouterr()
        assert "Active Version: v1.6.0" in captured.out
        assert "Binary Size: 2.0 KB" in captured.out
        assert "Installed: 2024-01-02 03:04:05" in captured.out
        assert "Architecture: linux/amd64" in captured.out
        assert "WARNING" not in captured.err

    def test_info_not_active(self, isolated_home, seed, capsys):
        seed("terraform", "v1.6.0")

        assert run_cli("info", "terraform") == 1
        assert "No active version of terraform" in capsys.readouterr().err

    def test_info_not_installed(self, isolated_home, capsys):
        assert run_cli("info", "terraform") == 1
        assert "No versions of terraform are installed" in capsys.readouterr().err

    def test_info_missing_binary(self, isolated_home, seed, capsys):
        seed("terraform", "v1.6.0")
        run_cli("use", "terraform@v1.6.0")
        (isolated_home / "tools" / "terraform" / "v1.6.0" / "terraform").unlink()
        capsys.readouterr()

        assert run_cli("info", "terraform") == 0
        assert "Binary file not found" in capsys.readouterr().err


class TestUninstallCommand:
    """Test 'binarius uninstall'."""

    def test_force(self, isolated_home, tmp_path, seed, capsys):
        seed("terraform", "v1.5.7", "v1.6.0")
        run_cli("use", "terraform@v1.6.0")

        assert run_cli("uninstall", "--force", "terraform@v1.6.0") == 0

        out = capsys.readouterr().out
        assert "Successfully uninstalled terraform@v1.6.0" in out
        assert "  - v1.5.7" in out
        assert not os.path.lexists(tmp_path / "bin" / "terraform")
        assert load_registry(isolated_home / "installation.json").list_versions(
            "terraform"
        ) == ["v1.5.7"]

    def test_confirmed(self, isolated_home, seed, monkeypatch):
        seed("terraform", "v1.6.0")
        monkeypatch.setattr("sys.stdin", io.StringIO("yes\n"))

        assert run_cli("uninstall", "terraform@v1.6.0") == 0
        assert load_registry(isolated_home / "installation.json").tools == {}

    def test_cancelled(self, isolated_home, seed, monkeypatch, capsys):
        seed("terraform", "v1.6.0")
        monkeypatch.setattr("sys.stdin", io.StringIO("n\n"))

        assert run_cli("uninstall", "terraform@v1.6.0") == 0

        assert "Uninstall cancelled" in capsys.readouterr().out
        assert load_registry(isolated_home / "installation.json").is_installed(
            "terraform", "v1.6.0"
        )

    def test_not_installed(self, isolated_home, capsys):
        assert run_cli("uninstall", "-f", "terraform@v1.6.0") == 1
        assert "binarius list terraform" in capsys.readouterr().err
