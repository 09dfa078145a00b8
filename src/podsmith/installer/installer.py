import asyncio
import glob
import logging
import re
import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .build_config import BUILD_CONFIG_FILENAME, BuildConfig
from ..config import InstallConfig
from ..domain.errors import DownloadError, FileSystemError, PodsmithError
from ..domain.models import Specification
from ..download import DownloaderRegistry
from ..project.writer import ProjectWriter, SourceListWriter
from ..resolution.resolver import sets_by_name
from ..resolution.set import SpecificationSet
from ..ui.progress import ProgressManager

logger = logging.getLogger(__name__)

# written last, so a directory without it is an unfinished download
COMPLETION_MARKER = ".podsmith-complete"

# used when a source_files pattern names a directory
DEFAULT_SOURCE_EXTENSIONS = ("h", "m", "mm", "c", "cpp")

_BRACES = re.compile(r"\{([^{}]*)\}")

def expand_braces(pattern: str) -> List[str]:
    """expand "*.{h,m}" into ["*.h", "*.m"]; glob itself has no alternation."""
    match = _BRACES.search(pattern)
    if not match:
        return [pattern]
    expanded = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(pattern[:match.start()] + option + pattern[match.end():]))
    return expanded


class Installer:
    """
    materializes a resolved closure into the build root.

    packages that are only ever referenced as part of another package are
    skipped; every other package gets its podspec copied, its owning source
    downloaded (once per destination), its source files collected and its
    build settings merged into Pods.xcconfig.
    """

    def __init__(
        self,
        config: InstallConfig,
        downloaders: Optional[DownloaderRegistry] = None,
        project_writer: Optional[ProjectWriter] = None,
        progress_manager: Optional[ProgressManager] = None,
    ):
        self.config = config
        self.downloaders = downloaders or DownloaderRegistry()
        self.project_writer = project_writer or SourceListWriter()
        self.progress_manager = progress_manager or ProgressManager()

    @property
    def build_root(self) -> Path:
        return self.config.build_root

    def destination_root(self, owner: Specification) -> Path:
        return self.build_root / owner.package_dirname

    def is_downloaded(self, destination: Path) -> bool:
        return (destination / COMPLETION_MARKER).is_file()

    async def install(self, sets: List[SpecificationSet]):
        """
        install every set of a resolved closure, in resolution order.

        raises:
            DownloadError: after all downloads finished, if any of them failed
            FileSystemError: if the build root cannot be written
        """
        table = sets_by_name(sets)

        # settle every winner and owner before anything touches the disk
        installing: List[Tuple[Specification, Specification]] = []
        for specification_set in sets:
            spec = specification_set.winning_specification()
            if specification_set.is_only_part_of_other_package():
                logger.debug(f"{spec} is only part of other packages, not installing it")
                continue
            if spec.defined_in_file is None:
                raise PodsmithError(f"{spec} has no podspec file to install from")
            installing.append((spec, spec.owning_specification(table)))

        self._mkdir(self.build_root)
        for spec, _ in installing:
            self.progress_manager.print(f"==> Installing: {spec}")
            self._copy_definition(spec)

        await self._download_all([owner for _, owner in installing])

        source_files: List[Path] = []
        build_config = BuildConfig()
        for spec, owner in installing:
            for path in self.collect_source_files(spec, owner):
                if path not in source_files:
                    source_files.append(path)
            if spec.build_config:
                build_config.merge(spec.build_config)

        try:
            self.project_writer.create_project(source_files, self.build_root)
        except OSError as e:
            raise FileSystemError(self.build_root, "create project in", str(e)) from e
        build_config.write(self.build_root / BUILD_CONFIG_FILENAME)

    def collect_source_files(self, spec: Specification, owner: Specification) -> List[Path]:
        """source files of `spec` inside its owner's tree, relative to the build root."""
        destination = self.destination_root(owner)
        base = glob.escape(str(destination))
        collected = []
        for pattern in spec.source_files:
            if (destination / pattern).is_dir():
                patterns = [f"{pattern}/*.{ext}" for ext in DEFAULT_SOURCE_EXTENSIONS]
            else:
                patterns = expand_braces(pattern)
            for expanded in patterns:
                for match in sorted(glob.glob(f"{base}/{expanded}", recursive=True)):
                    relative = Path(match).relative_to(self.build_root)
                    if relative not in collected:
                        collected.append(relative)
        return collected

    def _mkdir(self, path: Path):
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(path, "create directory", str(e)) from e

    def _copy_definition(self, spec: Specification):
        try:
            shutil.copy2(spec.defined_in_file, self.build_root / f"{spec.name}.podspec")
        except OSError as e:
            raise FileSystemError(spec.defined_in_file, f"copy podspec of {spec} from", str(e)) from e

    async def _download_all(self, owners: List[Specification]):
        # one download per destination, whoever asks for it first
        pending: Dict[Path, Specification] = {}
        for owner in owners:
            destination = self.destination_root(owner)
            if destination in pending:
                continue
            if self.is_downloaded(destination):
                self.progress_manager.print(f"  * Skipping download of {owner}, pod already downloaded")
                continue
            pending[destination] = owner

        locks = {destination: asyncio.Lock() for destination in pending}
        semaphore = asyncio.Semaphore(self.config.jobs)

        with self.progress_manager.package_progress("downloading", total=len(pending)) as (progress, task_id):
            results = await asyncio.gather(
                *[
                    self._download_async(owner, destination, locks[destination], semaphore, progress, task_id)
                    for destination, owner in pending.items()
                ],
                return_exceptions=True,
            )

        failures = [result for result in results if isinstance(result, Exception)]
        for failure in failures:
            logger.error(str(failure))
        if failures:
            raise failures[0]

    async def _download_async(self, owner, destination, lock, semaphore, progress=None, task_id=None):
        """download in an executor so independent packages fetch in parallel."""
        async with semaphore:
            async with lock:
                if not self.is_downloaded(destination):
                    self.progress_manager.print(f"  * Downloading: {owner}")
                    loop = asyncio.get_running_loop()
                    await loop.run_in_executor(None, self.download, owner, destination)
        if progress and task_id is not None:
            progress.advance(task_id, 1)

    def download(self, owner: Specification, destination: Path):
        """
        fetch `owner`'s source into `destination` and mark it complete.

        a leftover directory without the completion marker is discarded first;
        a failed fetch leaves no directory behind.
        """
        downloader = self.downloaders.for_source(str(owner), owner.source)

        try:
            if destination.exists():
                logger.warning(f"discarding incomplete download of {owner} at {destination}")
                shutil.rmtree(destination)
            destination.mkdir(parents=True)
            downloader.fetch(owner.source, destination)
            if self.config.clean:
                downloader.clean(destination)
            (destination / COMPLETION_MARKER).write_text(f"{owner.name} {owner.version}\n")
        except Exception as e:
            shutil.rmtree(destination, ignore_errors=True)
            if isinstance(e, DownloadError):
                raise
            raise DownloadError(str(owner), destination, str(e)) from e
