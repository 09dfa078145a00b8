from pathlib import Path
from typing import Dict, Optional
from pydantic import BaseModel, Field

CONFIG_DIR = Path.home() / ".podsmith"
CONFIG_FILE = CONFIG_DIR / "config"

DEFAULT_REPO_URL = "https://raw.githubusercontent.com/podsmith/specs/main"
DEFAULT_BUILD_ROOT = Path("Pods")

_TRUE = ("1", "true", "yes", "on")

class InstallConfig(BaseModel):
    """settings threaded through installation; nothing reads them from globals."""
    build_root: Path = DEFAULT_BUILD_ROOT
    clean: bool = True
    jobs: int = Field(default=4, ge=1)

def read_config(config_file: Path = CONFIG_FILE) -> Dict[str, str]:
    """read KEY=value lines from the config file."""
    config = {}
    if not config_file.exists():
        return config

    try:
        with open(config_file, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line and not line.startswith("#"):
                    key, value = line.split("=", 1)
                    config[key.strip()] = value.strip()
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config

def get_config_value(key: str, default: Optional[str] = None, config_file: Path = CONFIG_FILE) -> Optional[str]:
    return read_config(config_file).get(key, default)

def set_config_value(key: str, value: str, config_file: Path = CONFIG_FILE):
    """set a value in the config file, preserving other config values."""
    config_file.parent.mkdir(parents=True, exist_ok=True)

    config = read_config(config_file)
    config[key] = value

    try:
        with open(config_file, "w") as f:
            for k, v in config.items():
                f.write(f"{k}={v}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e

def get_repo_url(config_file: Path = CONFIG_FILE) -> str:
    return get_config_value("PODSMITH_REPO_URL", DEFAULT_REPO_URL, config_file)

def get_repo_dir(config_file: Path = CONFIG_FILE) -> Optional[Path]:
    value = get_config_value("PODSMITH_REPO_DIR", None, config_file)
    return Path(value).expanduser() if value else None

def load_install_config(
    build_root: Optional[Path] = None,
    clean: Optional[bool] = None,
    jobs: Optional[int] = None,
    config_file: Path = CONFIG_FILE,
) -> InstallConfig:
    """
    build an InstallConfig from the config file, explicit arguments winning.
    """
    stored = read_config(config_file)

    if clean is None and "PODSMITH_CLEAN" in stored:
        clean = stored["PODSMITH_CLEAN"].lower() in _TRUE
    if jobs is None and "PODSMITH_JOBS" in stored:
        jobs = int(stored["PODSMITH_JOBS"])

    values = {"build_root": build_root or DEFAULT_BUILD_ROOT}
    if clean is not None:
        values["clean"] = clean
    if jobs is not None:
        values["jobs"] = jobs
    return InstallConfig(**values)
