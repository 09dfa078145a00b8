"""parsing of podspec files and Podfiles into specifications."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Union

from .parser import Declaration, DefinitionParser
from ..domain.errors import ParseError, PodsmithError
from ..domain.models import Specification
from ..domain.versions import parse_version

if TYPE_CHECKING:
    from ..repository.client import SpecRepository

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

def _single(declaration: Declaration) -> str:
    if len(declaration.arguments) != 1 or declaration.options:
        raise ValueError(f"'{declaration.keyword}' takes exactly one value")
    return declaration.arguments[0].value

def _positional(declaration: Declaration) -> List[str]:
    if not declaration.arguments or declaration.options:
        raise ValueError(f"'{declaration.keyword}' takes one or more plain values")
    return declaration.positional

def _options(declaration: Declaration) -> Dict[str, str]:
    if not declaration.arguments or declaration.positional:
        raise ValueError(f"'{declaration.keyword}' takes one or more KEY = value pairs")
    return declaration.options

def _name(spec: Specification, declaration: Declaration, base_dir: Path):
    if spec.name is not None:
        raise ValueError("name is declared more than once")
    spec.set_name(_single(declaration))

def _version(spec: Specification, declaration: Declaration, base_dir: Path):
    if spec.version is not None:
        raise ValueError("version is declared more than once")
    spec.set_version(_single(declaration))

def _authors(spec: Specification, declaration: Declaration, base_dir: Path):
    if not declaration.arguments:
        raise ValueError("'authors' needs at least one author")
    spec.set_authors(*[
        a.value if a.key is None else {a.key: a.value}
        for a in declaration.arguments
    ])

def _source(spec: Specification, declaration: Declaration, base_dir: Path):
    source = dict(_options(declaration))
    # local sources are relative to the file that declares them
    if "path" in source:
        source["path"] = str((base_dir / source["path"]).resolve())
    spec.set_source(source)

_HANDLERS: Dict[str, Callable[[Specification, Declaration, Path], None]] = {
    "name": _name,
    "version": _version,
    "authors": _authors,
    "author": _authors,
    "homepage": lambda spec, d, base: spec.set_homepage(_single(d)),
    "summary": lambda spec, d, base: spec.set_summary(_single(d)),
    "description": lambda spec, d, base: spec.set_description(_single(d)),
    "part_of": lambda spec, d, base: spec.set_part_of(*_positional(d)),
    "part_of_dependency": lambda spec, d, base: spec.set_part_of_dependency(*_positional(d)),
    "source_files": lambda spec, d, base: spec.set_source_files(*_positional(d)),
    "source": _source,
    "dependency": lambda spec, d, base: spec.add_dependency(*_positional(d)),
    "build_config": lambda spec, d, base: spec.set_build_config(_options(d)),
    "xcconfig": lambda spec, d, base: spec.set_build_config(_options(d)),
}

def apply_declarations(
    spec: Specification,
    declarations: List[Declaration],
    path: Optional[Path] = None,
) -> Specification:
    base_dir = path.parent if path is not None else Path.cwd()
    for declaration in declarations:
        handler = _HANDLERS.get(declaration.keyword)
        if handler is None:
            raise ParseError(path, f"unknown declaration '{declaration.keyword}'", declaration.line)
        try:
            handler(spec, declaration, base_dir)
        except ParseError:
            raise
        except (PodsmithError, ValueError, TypeError) as e:
            raise ParseError(path, str(e), declaration.line) from e
    return spec

def parse_definition_text(text: str, path: Optional[Path] = None) -> Specification:
    """build an unsealed specification from definition source text."""
    declarations = DefinitionParser.from_text(text, path).parse()
    return apply_declarations(Specification(), declarations, path)

def _read(path: Path, kind: str) -> str:
    if not path.exists():
        raise FileNotFoundError(f"{kind} not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(path, f"could not read {kind}: {e}") from e

def parse_root_manifest(path: PathLike) -> Specification:
    """parse a Podfile; it lists dependencies but has no name or version."""
    path = Path(path)
    spec = parse_definition_text(_read(path, "Podfile"), path)
    if not spec.is_root_manifest:
        raise ParseError(path, "a Podfile cannot declare a name or version")
    spec.defined_in_file = path
    return spec.seal()

def parse_package_definition(path: PathLike) -> Specification:
    """parse a podspec; it must declare both name and version."""
    path = Path(path)
    spec = parse_definition_text(_read(path, "podspec"), path)
    if spec.name is None or spec.version is None:
        raise ParseError(path, "a podspec must declare both a name and a version")
    spec.defined_in_file = path
    return spec.seal()


class SpecificationLoader:
    """parses each published (name, version) once and serves it from memory afterwards."""

    def __init__(self, repository: "SpecRepository"):
        self.repository = repository
        self._loaded: Dict[Tuple[str, str], Specification] = {}

    def is_loaded(self, name: str, version: str) -> bool:
        return (name, version) in self._loaded

    def loaded_specifications(self, name: str) -> List[Specification]:
        return [spec for (n, _), spec in self._loaded.items() if n == name]

    def load(self, name: str, version: str) -> Specification:
        key = (name, version)
        if key in self._loaded:
            logger.debug(f"using already loaded specification for {name} ({version})")
            return self._loaded[key]

        path = self.repository.get_definition_path(name, version)
        spec = parse_package_definition(path)
        if spec.name != name or parse_version(spec.version) != parse_version(version):
            raise ParseError(path, f"declares {spec} but is published as {name} ({version})")

        self._loaded[key] = spec
        return spec
