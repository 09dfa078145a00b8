from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping

class Downloader(ABC):
    """fetches a package's source tree into a destination directory."""

    @abstractmethod
    def fetch(self, source: Mapping[str, str], destination: Path) -> None:
        """Place the source described by `source` in `destination`."""
        pass

    @abstractmethod
    def clean(self, destination: Path) -> None:
        """Remove whatever the build does not need from a fetched tree."""
        pass
