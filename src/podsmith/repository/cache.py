from pathlib import Path
import shutil

class LocalCache:
    """on-disk store of podspecs fetched from a remote repository, one file per version."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = cache_dir
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def get_definition_path(self, package_name: str, version: str) -> Path:
        return self.cache_dir / package_name / f"{version}.podspec"

    def has_definition(self, package_name: str, version: str) -> bool:
        return self.get_definition_path(package_name, version).is_file()

    def store(self, package_name: str, version: str, content: bytes) -> Path:
        target_path = self.get_definition_path(package_name, version)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        # a transfer that dies halfway must never look cached
        partial = target_path.with_suffix(".partial")
        partial.write_bytes(content)
        partial.replace(target_path)
        return target_path

    def clear(self):
        shutil.rmtree(self.cache_dir, ignore_errors=True)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
