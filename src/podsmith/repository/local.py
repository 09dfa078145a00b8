from pathlib import Path
from typing import List
from .client import SpecRepository

class LocalSpecRepository(SpecRepository):
    """
    a directory of vetted podspecs laid out as <root>/<Name>/<version>/<Name>.podspec.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def get_versions(self, package_name: str) -> List[str]:
        package_dir = self.root / package_name
        if not package_dir.is_dir():
            return []
        return sorted(
            child.name for child in package_dir.iterdir()
            if (child / f"{package_name}.podspec").is_file()
        )

    def get_definition_path(self, package_name: str, version: str) -> Path:
        path = self.root / package_name / version / f"{package_name}.podspec"
        if not path.is_file():
            raise FileNotFoundError(f"podspec for {package_name} ({version}) not found at {path}")
        return path
