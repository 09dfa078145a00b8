import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

SOURCE_LIST_FILENAME = "Pods.sources.json"

class ProjectWriter(ABC):
    @abstractmethod
    def create_project(self, source_files: List[Path], output_root: Path) -> Path:
        """Write a build project covering `source_files` (relative to `output_root`)."""
        pass

class SourceListWriter(ProjectWriter):
    """writes the collected sources as JSON for tools that generate real project files."""

    def create_project(self, source_files: List[Path], output_root: Path) -> Path:
        output_root.mkdir(parents=True, exist_ok=True)
        output_path = output_root / SOURCE_LIST_FILENAME
        data = {"source_files": [path.as_posix() for path in source_files]}
        with open(output_path, "w") as f:
            json.dump(data, f, indent=2)
        return output_path
