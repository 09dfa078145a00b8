from pathlib import Path
from typing import List, Optional, Union

class PodsmithError(Exception):
    """base class for exceptions in podsmith."""
    pass

class ParseError(PodsmithError):
    """raised when a definition file or manifest cannot be evaluated."""
    def __init__(self, path: Union[str, Path, None], message: str, line: Optional[int] = None):
        self.path = Path(path) if path is not None else None
        self.line = line
        self.message = message
        location = str(self.path) if self.path is not None else "<string>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {message}")

class InvalidRequirementError(PodsmithError):
    """raised when a version constraint expression cannot be parsed."""
    def __init__(self, requirement: str, reason: str = ""):
        self.requirement = requirement
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Invalid version requirement '{requirement}'{detail}")

class UnsatisfiableConstraintError(PodsmithError):
    """raised when no known version of a package satisfies every recorded constraint."""
    def __init__(
        self,
        package_name: str,
        requirements: List[str],
        available: List[str],
        dependent: Optional[str] = None,
    ):
        self.package_name = package_name
        self.requirements = requirements
        self.available = available
        self.dependent = dependent

        wanted = ", ".join(requirements) if requirements else "any version"
        message = f"Could not find a version of '{package_name}' that satisfies: {wanted}"
        if dependent:
            message += f" (required by {dependent})"
        if available:
            message += f"; available: {', '.join(available)}"
        else:
            message += "; no versions available"
        super().__init__(message)

class ResolutionStateError(PodsmithError):
    """raised when a set is queried before resolution has finished with it."""
    pass

class PartOfCycleError(PodsmithError):
    """raised when `part_of` declarations form a cycle."""
    def __init__(self, chain: List[str]):
        self.chain = chain
        super().__init__(f"Packages are part of each other: {' -> '.join(chain)}")

class DownloadError(PodsmithError):
    """raised when a package's source could not be fetched."""
    def __init__(self, package: str, destination: Union[str, Path, None], reason: str):
        self.package = package
        self.destination = Path(destination) if destination is not None else None
        self.reason = reason
        where = f" into {self.destination}" if self.destination is not None else ""
        super().__init__(f"Failed to download {package}{where}: {reason}")

class FileSystemError(PodsmithError):
    """raised when copying, creating or writing files in the build root fails."""
    def __init__(self, path: Union[str, Path], operation: str, reason: str):
        self.path = Path(path)
        self.operation = operation
        super().__init__(f"Could not {operation} {self.path}: {reason}")

class RepositoryError(PodsmithError):
    """raised when a spec repository cannot be read."""
    pass
