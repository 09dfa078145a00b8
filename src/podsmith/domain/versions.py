import re
from typing import Iterable, List
from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from .errors import InvalidRequirementError

# longest operators first so that ">=" is not read as ">"
_REQUIREMENT = re.compile(r"^\s*(~>|~=|===|==|!=|>=|<=|>|<|=)?\s*([^\s,]+)\s*$")

def parse_version(value: str) -> Version:
    try:
        return Version(str(value))
    except InvalidVersion as e:
        raise InvalidRequirementError(str(value), "not a valid version") from e

def _pessimistic_bound(version: Version) -> str:
    # "~> 1.2.3" allows up to (not including) 1.3, "~> 1.2" up to 2
    release = list(version.release)
    if len(release) == 1:
        upper = [release[0] + 1]
    else:
        upper = release[:-1]
        upper[-1] += 1
    return ".".join(str(part) for part in upper)

def translate_requirement(requirement: str) -> List[str]:
    """
    translate one constraint expression into PEP 440 specifier clauses.

    a bare version pins it exactly, and "~>" is expanded to a lower and an
    upper bound.
    """
    match = _REQUIREMENT.match(requirement)
    if not match:
        raise InvalidRequirementError(requirement)

    operator, version_text = match.groups()
    version = parse_version(version_text)

    if operator == "~>":
        return [f">={version}", f"<{_pessimistic_bound(version)}"]
    if operator in (None, "="):
        operator = "=="
    return [f"{operator}{version_text}"]

def to_specifier_set(requirements: Iterable[str]) -> SpecifierSet:
    """conjunction of all requirements; no requirements means any version."""
    requirements = list(requirements)
    clauses = []
    for requirement in requirements:
        clauses.extend(translate_requirement(requirement))
    try:
        return SpecifierSet(",".join(clauses))
    except InvalidSpecifier as e:
        raise InvalidRequirementError(", ".join(requirements), str(e)) from e

def satisfies(version: str, requirements: Iterable[str]) -> bool:
    # prereleases are only picked when a requirement names one explicitly
    return to_specifier_set(requirements).contains(parse_version(version), prereleases=None)
