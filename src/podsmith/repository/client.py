from abc import ABC, abstractmethod
from typing import List
from pathlib import Path

class SpecRepository(ABC):
    @abstractmethod
    def get_versions(self, package_name: str) -> List[str]:
        """Get the published versions of a package, or an empty list if it is unknown."""
        pass

    @abstractmethod
    def get_definition_path(self, package_name: str, version: str) -> Path:
        """Get a local path to the podspec of a specific package version."""
        pass


class ChainedSpecRepository(SpecRepository):
    """looks through several repositories, earlier ones winning for the same version."""

    def __init__(self, repositories: List[SpecRepository]):
        self.repositories = repositories

    def get_versions(self, package_name: str) -> List[str]:
        versions = []
        for repository in self.repositories:
            for version in repository.get_versions(package_name):
                if version not in versions:
                    versions.append(version)
        return versions

    def get_definition_path(self, package_name: str, version: str) -> Path:
        for repository in self.repositories:
            if version in repository.get_versions(package_name):
                return repository.get_definition_path(package_name, version)
        raise FileNotFoundError(f"podspec for {package_name} ({version}) not found in any repository")
