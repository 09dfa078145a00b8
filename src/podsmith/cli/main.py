import typer
import asyncio
import logging
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import (
    CONFIG_DIR,
    get_repo_dir,
    get_repo_url,
    load_install_config,
    set_config_value,
)
from ..definition.loader import parse_root_manifest
from ..installer.build_config import BUILD_CONFIG_FILENAME
from ..installer.installer import Installer
from ..repository.cache import LocalCache
from ..repository.client import ChainedSpecRepository, SpecRepository
from ..repository.github import GitHubSpecRepository
from ..repository.local import LocalSpecRepository
from ..resolution.resolver import Resolver
from ..services.info import InfoService
from ..ui.progress import ProgressManager

app = typer.Typer()
console = Console()

CONFIG_KEYS = ("PODSMITH_REPO_URL", "PODSMITH_REPO_DIR", "PODSMITH_CLEAN", "PODSMITH_JOBS")

def configure_logging(verbose: bool):
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

def get_repository(repo_dir: Optional[Path] = None) -> SpecRepository:
    # an explicit directory means working offline against it alone
    if repo_dir is not None:
        return LocalSpecRepository(repo_dir)

    repositories = []
    configured_dir = get_repo_dir()
    if configured_dir is not None:
        repositories.append(LocalSpecRepository(configured_dir))
    repositories.append(GitHubSpecRepository(get_repo_url(), LocalCache(CONFIG_DIR / "cache")))
    return ChainedSpecRepository(repositories)

@app.command()
def install(
    podfile: Path = typer.Argument(Path("Podfile"), help="Podfile listing the project's pods"),
    build_root: Optional[Path] = typer.Option(None, help="Directory the pods are installed into"),
    repo_dir: Optional[Path] = typer.Option(None, help="Local podspec repository to use instead of the remote one"),
    clean: Optional[bool] = typer.Option(None, "--clean/--no-clean", help="Remove VCS metadata after downloading"),
    jobs: Optional[int] = typer.Option(None, help="Number of parallel downloads"),
    verbose: bool = False,
):
    """resolve the Podfile's dependencies and install them into the build root."""
    configure_logging(verbose)
    progress_manager = ProgressManager(console)

    try:
        config = load_install_config(build_root, clean, jobs)
        root = parse_root_manifest(podfile)
        resolver = Resolver(get_repository(repo_dir))
        with progress_manager.spinner("resolving dependencies"):
            sets = resolver.resolve(root)

        installer = Installer(config, progress_manager=progress_manager)
        asyncio.run(installer.install(sets))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    installed = [s for s in sets if not s.is_only_part_of_other_package()]
    console.print(Panel.fit(
        f"[bold green]Pods Installed[/bold green]\n"
        f"Pods: {len(installed)}\n"
        f"Build root: {config.build_root}\n"
        f"Build config: {config.build_root / BUILD_CONFIG_FILENAME}",
        border_style="green"
    ))

@app.command()
def resolve(
    podfile: Path = typer.Argument(Path("Podfile")),
    repo_dir: Optional[Path] = typer.Option(None),
    verbose: bool = False,
):
    """show the resolved pods without installing anything."""
    configure_logging(verbose)
    try:
        sets = Resolver(get_repository(repo_dir)).resolve(parse_root_manifest(podfile))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Resolved pods")
    table.add_column("Pod", style="bold cyan")
    table.add_column("Version")
    table.add_column("Installed")
    table.add_column("Required by", style="dim")
    for specification_set in sets:
        spec = specification_set.winning_specification()
        installed = "part of another pod" if specification_set.is_only_part_of_other_package() else "yes"
        dependents = sorted({r.dependent for r in specification_set.references})
        table.add_row(spec.name, spec.version, installed, ", ".join(dependents))
    console.print(table)

@app.command()
def info(
    package_name: str,
    version: str = typer.Argument(None, help="Optional specific version"),
    repo_dir: Optional[Path] = typer.Option(None),
):
    """show information about a pod."""
    try:
        InfoService(get_repository(repo_dir), console).show_info(package_name, version)
    except Exception as e:
        console.print(f"[red]Error fetching pod info:[/red] {e}")
        raise typer.Exit(code=1)

@app.command()
def cache(action: str = typer.Argument(..., help="Action to perform: 'clear'")):
    """manage the cache of fetched podspecs."""
    if action != "clear":
        console.print(f"[red]Invalid action '{action}'. Use 'clear'.[/red]")
        raise typer.Exit(code=1)
    LocalCache(CONFIG_DIR / "cache").clear()
    console.print("[green]✓ Podspec cache cleared[/green]")

@app.command()
def config(key: str, value: str):
    """persist a configuration value (e.g. PODSMITH_REPO_URL)."""
    if key not in CONFIG_KEYS:
        console.print(f"[red]Unknown key '{key}'. Use one of: {', '.join(CONFIG_KEYS)}[/red]")
        raise typer.Exit(code=1)
    try:
        set_config_value(key, value)
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ {key} set[/green]")

if __name__ == "__main__":
    app()
