import logging
import shutil
from pathlib import Path
from typing import Mapping
from .base import Downloader

logger = logging.getLogger(__name__)

VCS_DIRECTORIES = (".git", ".hg", ".svn")

class LocalDownloader(Downloader):
    """copies a source tree that already exists on disk (`source path = "..."`)."""

    def fetch(self, source: Mapping[str, str], destination: Path) -> None:
        origin = Path(source["path"]).expanduser()
        if not origin.is_dir():
            raise FileNotFoundError(f"source directory not found: {origin}")
        logger.debug(f"copying {origin} to {destination}")
        shutil.copytree(origin, destination, dirs_exist_ok=True)

    def clean(self, destination: Path) -> None:
        for name in VCS_DIRECTORIES:
            for path in list(destination.rglob(name)):
                # a nested match may already be gone with its parent
                if path.is_dir():
                    shutil.rmtree(path)
