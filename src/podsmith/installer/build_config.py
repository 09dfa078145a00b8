from pathlib import Path
from typing import Dict, Mapping, Optional
from ..domain.errors import FileSystemError

BUILD_CONFIG_FILENAME = "Pods.xcconfig"

DEFAULT_BUILD_CONFIG = {
    # in a workspace this is where the static library headers should be found
    "USER_HEADER_SEARCH_PATHS": "$(BUILT_PRODUCTS_DIR)",
    # search the user headers
    "ALWAYS_SEARCH_USER_PATHS": "YES",
}

class BuildConfig:
    """
    the aggregate of every installed package's build settings.

    a key contributed twice keeps both values, space separated, in the order
    they were merged.
    """

    def __init__(self, defaults: Optional[Mapping[str, str]] = None):
        self.values: Dict[str, str] = dict(DEFAULT_BUILD_CONFIG if defaults is None else defaults)

    def merge(self, fragment: Mapping[str, str]) -> "BuildConfig":
        for key, value in fragment.items():
            existing = self.values.get(key)
            if existing:
                self.values[key] = f"{existing} {value}"
            else:
                self.values[key] = value
        return self

    def to_text(self) -> str:
        return "".join(f"{key} = {value}\n" for key, value in self.values.items())

    def write(self, path: Path) -> Path:
        try:
            path.write_text(self.to_text())
        except OSError as e:
            raise FileSystemError(path, "write build config", str(e)) from e
        return path
