"""test suite for build config merging."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from podsmith.installer.build_config import DEFAULT_BUILD_CONFIG, BuildConfig
from podsmith.domain.errors import FileSystemError


class TestBuildConfig:
    def test_seeded_with_defaults(self):
        config = BuildConfig()
        assert config.values == DEFAULT_BUILD_CONFIG
        assert config.values["ALWAYS_SEARCH_USER_PATHS"] == "YES"
        assert config.values["USER_HEADER_SEARCH_PATHS"] == "$(BUILT_PRODUCTS_DIR)"

    def test_defaults_not_shared_between_instances(self):
        BuildConfig().merge({"OTHER_LDFLAGS": "-lz"})
        assert "OTHER_LDFLAGS" not in BuildConfig().values

    def test_same_key_concatenates(self):
        config = BuildConfig(defaults={})
        config.merge({"A": "X"}).merge({"A": "Y"})
        assert config.values == {"A": "X Y"}

    def test_new_key_leaves_defaults_alone(self):
        config = BuildConfig()
        config.merge({"B": "1"})
        assert config.values["B"] == "1"
        for key, value in DEFAULT_BUILD_CONFIG.items():
            assert config.values[key] == value

    def test_merging_into_default_key_appends(self):
        config = BuildConfig()
        config.merge({"USER_HEADER_SEARCH_PATHS": "$(SRCROOT)/Pods/JSONKit-1.4"})
        assert config.values["USER_HEADER_SEARCH_PATHS"] == "$(BUILT_PRODUCTS_DIR) $(SRCROOT)/Pods/JSONKit-1.4"

    def test_to_text(self):
        config = BuildConfig(defaults={"A": "X"})
        config.merge({"OTHER_LDFLAGS": "-lz"})
        assert config.to_text() == "A = X\nOTHER_LDFLAGS = -lz\n"

    def test_write(self, tmp_path):
        path = BuildConfig().write(tmp_path / "Pods.xcconfig")
        lines = path.read_text().splitlines()
        assert "ALWAYS_SEARCH_USER_PATHS = YES" in lines

    def test_write_failure(self, tmp_path):
        with pytest.raises(FileSystemError) as exc_info:
            BuildConfig().write(tmp_path / "missing" / "Pods.xcconfig")
        assert "Pods.xcconfig" in str(exc_info.value)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
