from typing import Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..definition.loader import SpecificationLoader
from ..domain.errors import UnsatisfiableConstraintError
from ..domain.models import Dependency
from ..repository.client import SpecRepository
from ..resolution.set import SpecificationSet

class InfoService:
    """looks up a published podspec and displays its metadata."""

    def __init__(self, repository: SpecRepository, console: Optional[Console] = None):
        self.repository = repository
        self.loader = SpecificationLoader(repository)
        self.console = console or Console()

    def show_info(self, package_name: str, version: Optional[str] = None):
        """
        display information about a package.

        args:
            package_name: name of the package
            version: optional specific version, the latest if omitted

        raises:
            UnsatisfiableConstraintError: if the package or version is not published
        """
        lookup = SpecificationSet(package_name, self.repository, self.loader)
        requirements = [version] if version else []
        lookup.add_reference(Dependency(name=package_name, requirements=requirements), "info")
        spec = lookup.winning_specification()
        versions = lookup.available_versions()

        grid = Table.grid(expand=True)
        grid.add_column(style="bold cyan", justify="right")
        grid.add_column(style="white")

        grid.add_row("Name:", spec.name)
        grid.add_row("Version:", spec.version)
        grid.add_row("Summary:", spec.summary or "No summary provided.")
        if spec.description and spec.description != spec.summary:
            grid.add_row("Description:", spec.description)

        if spec.authors:
            authors = [f"{name} <{email}>" if email else name for name, email in spec.authors.items()]
            grid.add_row("Authors:", ", ".join(authors))
        if spec.homepage:
            grid.add_row("Homepage:", spec.homepage)
        if spec.source:
            grid.add_row("Source:", ", ".join(f"{k}={v}" for k, v in spec.source.items()))
        if spec.part_of:
            grid.add_row("Part of:", str(spec.part_of))

        ordinary = [str(d) for d in spec.dependencies if not d.is_part_of]
        grid.add_row("Dependencies:", ", ".join(ordinary) if ordinary else "None")

        others = [v for v in versions if v != spec.version][:5]
        if others:
            grid.add_row("Other Versions:", ", ".join(others))

        self.console.print(Panel(grid, title=f"Pod Info: {package_name}", border_style="cyan"))
        return spec
