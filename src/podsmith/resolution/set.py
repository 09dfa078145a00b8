import logging
from typing import List, NamedTuple, Optional
from packaging.version import InvalidVersion, Version

from ..definition.loader import SpecificationLoader
from ..domain.errors import ResolutionStateError, UnsatisfiableConstraintError
from ..domain.models import Dependency, Specification
from ..domain.versions import to_specifier_set
from ..repository.client import SpecRepository

logger = logging.getLogger(__name__)

class Reference(NamedTuple):
    dependency: Dependency
    dependent: str

class SpecificationSet:
    """
    everything one resolution pass knows about a single package name.

    the winning specification is picked the first time it is asked for: the
    highest published version satisfying every constraint recorded so far.
    references added afterwards must still be satisfied by that version.
    """

    def __init__(self, name: str, repository: SpecRepository, loader: SpecificationLoader):
        self.name = name
        self.repository = repository
        self.loader = loader
        self.references: List[Reference] = []
        self._winner: Optional[Specification] = None
        self._finalized = False

    @property
    def requirements(self) -> List[str]:
        requirements = []
        for reference in self.references:
            for requirement in reference.dependency.requirements:
                if requirement not in requirements:
                    requirements.append(requirement)
        return requirements

    @property
    def candidate_specifications(self) -> List[Specification]:
        return self.loader.loaded_specifications(self.name)

    @property
    def is_expanded(self) -> bool:
        return self._winner is not None

    def add_reference(self, dependency: Dependency, dependent: str):
        if dependency.name != self.name:
            raise ValueError(f"reference to '{dependency.name}' added to the set for '{self.name}'")
        if self._finalized:
            raise ResolutionStateError(f"the set for '{self.name}' is already finalized")

        self.references.append(Reference(dependency, dependent))

        if self._winner is not None and not dependency.is_satisfied_by(self._winner.version):
            # no backtracking: the version picked first has to hold for everyone
            raise UnsatisfiableConstraintError(
                self.name, self.requirements, [self._winner.version], dependent
            )

    def available_versions(self) -> List[str]:
        """published versions, highest first."""
        parsed = []
        for version in self.repository.get_versions(self.name):
            try:
                parsed.append((Version(version), version))
            except InvalidVersion:
                logger.warning(f"ignoring invalid version '{version}' of {self.name}")
        return [text for _, text in sorted(parsed, reverse=True)]

    def satisfying_versions(self) -> List[str]:
        available = self.available_versions()
        allowed = set(to_specifier_set(self.requirements).filter(available))
        return [version for version in available if version in allowed]

    def winning_specification(self) -> Specification:
        if self._winner is None:
            versions = self.satisfying_versions()
            if not versions:
                dependent = self.references[-1].dependent if self.references else None
                raise UnsatisfiableConstraintError(
                    self.name, self.requirements, self.available_versions(), dependent
                )
            self._winner = self.loader.load(self.name, versions[0])
            logger.debug(f"picked {self._winner} for {', '.join(self.requirements) or 'any version'}")
        return self._winner

    def finalize(self):
        """close the set to new references; part-of queries are valid from here on."""
        self.winning_specification()
        self._finalized = True

    def is_only_part_of_other_package(self) -> bool:
        if not self._finalized:
            raise ResolutionStateError(
                f"cannot tell whether '{self.name}' is only part of other packages before resolution finishes"
            )
        return bool(self.references) and all(r.dependency.is_part_of for r in self.references)

    def __repr__(self) -> str:
        return f"<SpecificationSet {self.name} {self._winner.version if self._winner else '?'}>"
