"""source downloaders, looked up by the kind of source a podspec declares."""
from typing import Dict, Mapping, Optional
from .base import Downloader
from .local import LocalDownloader
from ..domain.errors import DownloadError


class DownloaderRegistry:
    """maps a source kind (the first known key of a `source` mapping) to a downloader."""

    def __init__(self, downloaders: Optional[Dict[str, Downloader]] = None):
        self.downloaders: Dict[str, Downloader] = {"path": LocalDownloader()}
        self.downloaders.update(downloaders or {})

    def register(self, kind: str, downloader: Downloader):
        self.downloaders[kind] = downloader

    def for_source(self, package: str, source: Optional[Mapping[str, str]]) -> Downloader:
        if not source:
            raise DownloadError(package, None, "no source declared")
        for kind in source:
            if kind in self.downloaders:
                return self.downloaders[kind]
        raise DownloadError(
            package, None, f"no downloader for source kinds: {', '.join(source)}"
        )


__all__ = [
    "Downloader",
    "DownloaderRegistry",
    "LocalDownloader",
]
