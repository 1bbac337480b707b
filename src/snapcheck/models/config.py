"""Project configuration model for snapcheck.

Captures snapcheck.yaml fields with sensible defaults, and parses the
update-mode toggle. Only the outermost harness (the pytest plugin)
reads the environment; the core receives a plain boolean.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

from snapcheck.serialization.formats import SnapshotFormat

CONFIG_FILENAME = "snapcheck.yaml"
UPDATE_ENV_VAR = "SNAPCHECK_UPDATE"

_UPDATE_ON = {"1", "true", "yes", "on", "always"}
_UPDATE_OFF = {"", "0", "false", "no", "off", "never"}


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from snapcheck.yaml."""

    model_config = {"extra": "forbid"}

    snapshot_dir: str = "snapshots"
    default_format: SnapshotFormat = SnapshotFormat.YAML
    creator: str | None = None


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for snapcheck.yaml or pyproject.toml.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        The first directory containing either file, or cwd if neither
        is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists() or (current / "pyproject.toml").exists():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from snapcheck.yaml. Returns defaults if not found.

    Args:
        project_root: Path to the project root directory. If None,
            uses find_project_root() to locate it.

    Returns:
        Validated ProjectConfig instance.
    """
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return ProjectConfig()
    import yaml

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return ProjectConfig()
    return ProjectConfig.model_validate(raw)


def parse_update_mode(value: str | None) -> bool:
    """Interpret an update-mode setting.

    Raises:
        ValueError: If the value is not a recognized on/off spelling.
    """
    normalized = (value or "").strip().lower()
    if normalized in _UPDATE_ON:
        return True
    if normalized in _UPDATE_OFF:
        return False
    raise ValueError(
        f"Invalid {UPDATE_ENV_VAR} value {value!r}. "
        f"Use one of {sorted(_UPDATE_ON)} or {sorted(_UPDATE_OFF - {''})}."
    )


def update_mode_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Read the update-mode toggle from SNAPCHECK_UPDATE."""
    env = os.environ if environ is None else environ
    return parse_update_mode(env.get(UPDATE_ENV_VAR))
