from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Union
from packaging.specifiers import SpecifierSet
from pydantic import BaseModel, Field, PrivateAttr, field_validator

from .errors import PartOfCycleError, PodsmithError
from .versions import parse_version, satisfies, to_specifier_set, translate_requirement

if TYPE_CHECKING:
    from ..resolution.set import SpecificationSet

class Dependency(BaseModel):
    """a named reference to a package, optionally marking "my source lives in there"."""
    name: str = Field(min_length=1)
    requirements: List[str] = Field(default_factory=list)
    is_part_of: bool = False

    @field_validator("requirements")
    @classmethod
    def _check_requirements(cls, value: List[str]) -> List[str]:
        for requirement in value:
            translate_requirement(requirement)
        return value

    @property
    def specifier_set(self) -> SpecifierSet:
        return to_specifier_set(self.requirements)

    def is_satisfied_by(self, version: str) -> bool:
        return satisfies(version, self.requirements)

    def __str__(self) -> str:
        if self.requirements:
            return f"{self.name} ({', '.join(self.requirements)})"
        return self.name


class Specification(BaseModel):
    """
    the declarative description of one package (or of a root manifest).

    every declaration method sets a single field and returns the value it
    assigned. once the loader seals a specification the declarations are
    rejected, so resolution and installation only ever read it.
    """
    name: Optional[str] = None
    version: Optional[str] = None
    authors: Dict[str, Optional[str]] = Field(default_factory=dict)
    homepage: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    source: Optional[Dict[str, str]] = None
    source_files: List[str] = Field(default_factory=list)
    build_config: Dict[str, str] = Field(default_factory=dict)
    part_of: Optional[Dependency] = None
    dependencies: List[Dependency] = Field(default_factory=list)
    defined_in_file: Optional[Path] = None

    _sealed: bool = PrivateAttr(default=False)

    # declarations

    def set_name(self, name: str) -> str:
        self._check_mutable()
        if not name:
            raise ValueError("package name cannot be empty")
        self.name = name
        return name

    def set_version(self, version: str) -> str:
        self._check_mutable()
        parse_version(version)
        self.version = str(version)
        return self.version

    def set_authors(self, *authors: Union[str, Mapping[str, Optional[str]]]) -> Dict[str, Optional[str]]:
        """accepts plain names and {name: email} mappings, in any mix."""
        self._check_mutable()
        merged: Dict[str, Optional[str]] = {}
        for author in authors:
            if isinstance(author, Mapping):
                merged.update(author)
            else:
                merged[author] = None
        self.authors = merged
        return merged

    def set_homepage(self, url: str) -> str:
        self._check_mutable()
        self.homepage = url
        return url

    def set_summary(self, summary: str) -> str:
        self._check_mutable()
        self.summary = summary
        if not self.description:
            self.description = summary
        return summary

    def set_description(self, description: str) -> str:
        self._check_mutable()
        self.description = description
        return description

    def set_part_of(self, name: str, *requirements: str) -> Dependency:
        dependency = self.add_dependency(name, *requirements)
        dependency.is_part_of = True
        self.part_of = dependency
        return dependency

    def set_part_of_dependency(self, name: str, *requirements: str) -> Dependency:
        """part of `name`'s source, and also an ordinary dependency on it."""
        part_of = self.set_part_of(name, *requirements)
        self.add_dependency(name, *requirements)
        return part_of

    def set_source_files(self, *patterns: str) -> List[str]:
        self._check_mutable()
        self.source_files = list(patterns)
        return self.source_files

    def set_source(self, source: Mapping[str, str]) -> Dict[str, str]:
        self._check_mutable()
        self.source = {str(k): str(v) for k, v in source.items()}
        return self.source

    def add_dependency(self, name: str, *requirements: str) -> Dependency:
        self._check_mutable()
        dependency = Dependency(name=name, requirements=list(requirements))
        self.dependencies.append(dependency)
        return dependency

    def set_build_config(self, fragment: Mapping[str, str]) -> Dict[str, str]:
        self._check_mutable()
        self.build_config = {str(k): str(v) for k, v in fragment.items()}
        return self.build_config

    def seal(self) -> "Specification":
        self._sealed = True
        return self

    def _check_mutable(self):
        if self._sealed:
            raise PodsmithError(f"{self} is read-only once parsed")

    # derived queries

    @property
    def is_root_manifest(self) -> bool:
        return self.name is None and self.version is None

    @property
    def is_part_of_other_package(self) -> bool:
        return self.part_of is not None

    @property
    def package_dirname(self) -> str:
        return f"{self.name}-{self.version}"

    def owning_specification(self, sets: Mapping[str, "SpecificationSet"]) -> "Specification":
        """
        the specification whose downloaded source also holds this one's.

        follows `part_of` through the name -> set table until a specification
        that is not part of another package is reached.
        """
        current = self
        chain = [str(self.name)]
        while current.part_of is not None:
            owner_name = current.part_of.name
            if owner_name in chain:
                raise PartOfCycleError(chain + [owner_name])
            chain.append(owner_name)
            if owner_name not in sets:
                raise PodsmithError(
                    f"{current} is part of '{owner_name}', which was not resolved"
                )
            current = sets[owner_name].winning_specification()
        return current

    def __str__(self) -> str:
        if self.is_root_manifest:
            return f"Podfile at {self.defined_in_file}"
        return f"{self.name} ({self.version})"
