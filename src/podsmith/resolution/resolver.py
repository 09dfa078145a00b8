import logging
from typing import Dict, List, Optional
from ..definition.loader import SpecificationLoader
from ..domain.errors import PodsmithError
from ..domain.models import Specification
from ..repository.client import SpecRepository
from .set import SpecificationSet

logger = logging.getLogger(__name__)

class Resolver:
    """
    computes the transitive closure of the sets a specification needs.

    this is a depth-first walk, not a solver: each set's version is fixed the
    first time the set is expanded and is never revisited.
    """

    def __init__(self, repository: SpecRepository, loader: Optional[SpecificationLoader] = None):
        self.repository = repository
        self.loader = loader or SpecificationLoader(repository)

    def resolve(self, root: Specification) -> List[SpecificationSet]:
        """
        resolve every dependency of `root`, transitively.

        returns:
            one set per package name, in order of first discovery.

        raises:
            UnsatisfiableConstraintError: if a name has no version matching its constraints
            ParseError: if a podspec on the way cannot be parsed
        """
        sets: Dict[str, SpecificationSet] = {}
        self._expand(root, sets)

        # part-of status is only meaningful once every reference is in
        for specification_set in sets.values():
            specification_set.finalize()

        logger.debug(f"resolved {len(sets)} sets for {root}")
        return list(sets.values())

    def _expand(self, specification: Specification, sets: Dict[str, SpecificationSet]):
        for dependency in specification.dependencies:
            specification_set = sets.get(dependency.name)
            created = specification_set is None
            if created:
                specification_set = SpecificationSet(dependency.name, self.repository, self.loader)
                sets[dependency.name] = specification_set

            try:
                specification_set.add_reference(dependency, str(specification))
                if specification_set.is_expanded:
                    continue
                winner = specification_set.winning_specification()
            except (PodsmithError, FileNotFoundError):
                # never leave a set behind without a winner
                if created:
                    del sets[dependency.name]
                raise

            logger.debug(f"expanding {winner} (required by {specification})")
            self._expand(winner, sets)


def sets_by_name(sets: List[SpecificationSet]) -> Dict[str, SpecificationSet]:
    return {specification_set.name: specification_set for specification_set in sets}
