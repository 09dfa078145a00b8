import httpx
import logging
from typing import List, Optional
from pathlib import Path
from .cache import LocalCache
from .client import SpecRepository
from ..domain.errors import RepositoryError

logger = logging.getLogger(__name__)

class GitHubSpecRepository(SpecRepository):
    """
    podspecs published in a repository served over HTTP (e.g. raw.githubusercontent.com).

    the root holds an index.json of {name: {versions: {version: {path: ...}}}};
    fetched podspecs are kept in a LocalCache and never fetched twice.
    """

    def __init__(self, base_url: str, cache: LocalCache, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.client = client or httpx.Client()
        self._index_cache: Optional[dict] = None

    def get_versions(self, package_name: str) -> List[str]:
        index = self._get_index()
        if package_name not in index:
            return []
        return list(index[package_name].get("versions", {}).keys())

    def get_definition_path(self, package_name: str, version: str) -> Path:
        if self.cache.has_definition(package_name, version):
            logger.debug(f"podspec for {package_name} ({version}) already cached")
            return self.cache.get_definition_path(package_name, version)

        versions = self._get_index().get(package_name, {}).get("versions", {})
        if version not in versions:
            raise FileNotFoundError(f"Version {version} not found for package {package_name}")

        # metadata contains 'path' relative to the repository root
        relative_path = versions[version].get("path")

        if relative_path:
            try:
                return self._download(f"{self.base_url}/{relative_path}", package_name, version)
            except httpx.HTTPStatusError as e:
                if e.response.status_code != 404:
                    raise RepositoryError(f"Could not fetch podspec for {package_name} ({version}): {e}") from e
                # if 404, fall through to the conventional layout
            except httpx.HTTPError as e:
                raise RepositoryError(f"Could not fetch podspec for {package_name} ({version}): {e}") from e

        # conventional layout: Specs/{name}/{version}/{name}.podspec
        legacy_url = f"{self.base_url}/Specs/{package_name}/{version}/{package_name}.podspec"
        try:
            return self._download(legacy_url, package_name, version)
        except httpx.HTTPError as e:
            raise RepositoryError(f"Could not fetch podspec for {package_name} ({version}): {e}") from e

    def refresh(self) -> dict:
        self._index_cache = None
        return self._get_index()

    def _download(self, url: str, package_name: str, version: str) -> Path:
        response = self.client.get(url)
        response.raise_for_status()
        return self.cache.store(package_name, version, response.content)

    def _get_index(self) -> dict:
        if self._index_cache is not None:
            return self._index_cache

        url = f"{self.base_url}/index.json"
        try:
            response = self.client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RepositoryError(f"Could not read repository index at {url}: {e}") from e

        self._index_cache = data
        return data
