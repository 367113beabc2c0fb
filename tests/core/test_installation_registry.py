"""
Tests for the installation registry.
"""

import json
from datetime import datetime, timezone

import pytest

from binarius.core.exceptions import RegistryError
from binarius.core.registry import (
    InstallationRegistry,
    InstallStatus,
    ToolVersion,
    load_registry,
    save_registry,
)


def make_version(tool="terraform", version="v1.6.0", **kwargs) -> ToolVersion:
    defaults = dict(
        tool_name=tool,
        version=version,
        binary_path=f"/home/user/.binarius/tools/{tool}/{version}/{tool}",
        installed_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        size_bytes=1234,
        source_url=f"https://example.com/{tool}_{version}.zip",
        checksum="a" * 64,
        architecture="linux/amd64",
    )
    defaults.update(kwargs)
    return ToolVersion(**defaults)


class TestToolVersion:
    """Test ToolVersion serialization."""

    def test_to_dict(self):
        """Test every populated field is written."""
        data = make_version().to_dict()

        assert data["tool_name"] == "terraform"
        assert data["installed_at"] == "2024-01-01T00:00:00+00:00"
        assert data["status"] == "complete"
        assert data["architecture"] == "linux/amd64"

    def test_empty_fields_omitted(self):
        """Test empty optional fields are left out but binary_path is kept."""
        data = ToolVersion().to_dict()

        assert data == {"binary_path": "", "status": "complete"}

    def test_from_dict_round_trip(self):
        """Test from_dict inverts to_dict."""
        record = make_version(status=InstallStatus.BROKEN)
        assert ToolVersion.from_dict(record.to_dict()) == record

    def test_from_dict_bad_status(self):
        """Test an unknown status is rejected."""
        with pytest.raises(ValueError):
            ToolVersion.from_dict({"binary_path": "/x", "status": "exploded"})


class TestInstallationRegistry:
    """Test in-memory registry operations."""

    def test_add_and_get(self):
        """Test a version can be added and looked up."""
        registry = InstallationRegistry()
        record = make_version()

        registry.add_version("terraform", "v1.6.0", record)

        assert registry.get_version("terraform", "v1.6.0") is record
        assert registry.is_installed("terraform", "v1.6.0")
        assert registry.get_version("terraform", "v9.9.9") is None
        assert registry.get_version("tofu", "v1.6.0") is None

    def test_remove_last_version_drops_tool(self):
        """Test removing the last version removes the tool key."""
        registry = InstallationRegistry()
        registry.add_version("terraform", "v1.6.0", make_version())

        registry.remove_version("terraform", "v1.6.0")

        assert "terraform" not in registry.tools
        assert registry.list_tools() == []

    def test_add_then_remove_restores_state(self):
        """Test add followed by remove leaves other versions untouched."""
        registry = InstallationRegistry()
        registry.add_version("terraform", "v1.5.7", make_version(version="v1.5.7"))
        before = registry.to_dict()

        registry.add_version("terraform", "v1.6.0", make_version())
        registry.remove_version("terraform", "v1.6.0")

        assert registry.to_dict() == before

    def test_remove_missing_is_noop(self):
        """Test removing unknown entries does nothing."""
        registry = InstallationRegistry()
        registry.remove_version("terraform", "v1.6.0")
        assert registry.tools == {}

    def test_list_versions_newest_first(self):
        """Test versions are ordered by semantic version, newest first."""
        registry = InstallationRegistry()
        for version in ["v1.5.7", "v1.10.0", "v1.6.0-beta1", "v1.6.0"]:
            registry.add_version("terraform", version, make_version(version=version))

        assert registry.list_versions("terraform") == [
            "v1.10.0",
            "v1.6.0",
            "v1.6.0-beta1",
            "v1.5.7",
        ]
        assert registry.list_versions("tofu") == []

    def test_list_tools_sorted(self):
        """Test tool names are sorted."""
        registry = InstallationRegistry()
        registry.add_version("tofu", "v1.6.0", make_version("tofu"))
        registry.add_version("terraform", "v1.6.0", make_version())

        assert registry.list_tools() == ["terraform", "tofu"]

    def test_set_status(self):
        """Test status updates and unknown versions."""
        registry = InstallationRegistry()
        registry.add_version("terraform", "v1.6.0", make_version())

        registry.set_status("terraform", "v1.6.0", InstallStatus.PARTIAL)

        assert registry.get_version("terraform", "v1.6.0").status is InstallStatus.PARTIAL
        with pytest.raises(KeyError):
            registry.set_status("terraform", "v0.0.1", InstallStatus.BROKEN)


class TestPersistence:
    """Test load_registry / save_registry."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test loading a missing file gives an empty registry."""
        registry = load_registry(tmp_path / "installation.json")
        assert registry.tools == {}

    def test_save_then_load(self, tmp_path):
        """Test saving then loading gives an equal registry."""
        path = tmp_path / "installation.json"
        registry = InstallationRegistry()
        registry.add_version("terraform", "v1.6.0", make_version())
        registry.add_version("tofu", "v1.6.0", make_version("tofu", status=InstallStatus.PARTIAL))

        save_registry(registry, path)

        assert load_registry(path) == registry

    def test_saved_layout(self, tmp_path):
        """Test the on-disk JSON layout."""
        path = tmp_path / "installation.json"
        registry = InstallationRegistry()
        registry.add_version("terraform", "v1.6.0", make_version())

        save_registry(registry, path)

        data = json.loads(path.read_text())
        assert list(data) == ["tools"]
        assert data["tools"]["terraform"]["v1.6.0"]["binary_path"].endswith("/terraform")

    def test_save_leaves_no_temp_files(self, tmp_path):
        """Test only installation.json remains after repeated saves."""
        path = tmp_path / "installation.json"
        registry = InstallationRegistry()
        save_registry(registry, path)
        registry.add_version("terraform", "v1.6.0", make_version())
        save_registry(registry, path)

        assert [p.name for p in tmp_path.iterdir()] == ["installation.json"]

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[]", '{"tools": 5}', '{"tools": {"terraform": {"v1.6.0": 5}}}'],
    )
    def test_corrupt_file_raises(self, tmp_path, content):
        """Test a corrupt registry is reported, never silently reset."""
        path = tmp_path / "installation.json"
        path.write_text(content)

        with pytest.raises(RegistryError, match="Failed to load installation registry"):
            load_registry(path)

        assert path.read_text() == content

    def test_empty_object_loads(self, tmp_path):
        """Test '{}' (as written by init) loads as empty."""
        path = tmp_path / "installation.json"
        path.write_text("{}")
        assert load_registry(path).tools == {}
