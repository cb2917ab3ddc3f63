"""Configuration loading for declexport (.declexport.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".declexport.yml"
DEFAULT_OUTPUT = "export.json"
DEFAULT_SPLIT_DEPTH = 4


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ImportConfig:
    """Labels and modules used to classify where a tactic becomes available."""

    core_label: str = "always imported"
    baseline_module: str = "tactic.basic"
    baseline_label: str = "import tactic.basic"
    full_module: str = "tactic"
    full_label: str = "import tactic"


@dataclass
class ExportConfig:
    """Represents the settings defined in .declexport.yml."""

    root: Path
    output: Path
    split_depth: int = DEFAULT_SPLIT_DEPTH
    project_paths: List[str] = field(default_factory=list)
    imports: ImportConfig = field(default_factory=ImportConfig)

    def in_project(self, filename: str) -> bool:
        """Return True when ``filename`` belongs to the documented project."""
        if not self.project_paths:
            return True
        normalised = filename.replace("\\", "/")
        return any(normalised.startswith(prefix) for prefix in self.project_paths)


def default_config(root: Path | None = None) -> ExportConfig:
    root = (root or Path.cwd()).resolve()
    return ExportConfig(root=root, output=root / DEFAULT_OUTPUT)


def load_config(config_path: Path) -> ExportConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return default_config(root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output_str = _as_str(data.get("output"))
    output = root / output_str if output_str else root / DEFAULT_OUTPUT

    split_depth = DEFAULT_SPLIT_DEPTH
    if "split_depth" in data:
        parsed = _as_int(data.get("split_depth"))
        if parsed is None or parsed < 0:
            raise ConfigError("split_depth must be a non-negative integer")
        split_depth = parsed

    imports = ImportConfig()
    import_data = _as_dict(data.get("imports"))
    for key in ("core_label", "baseline_module", "baseline_label", "full_module", "full_label"):
        value = _as_str(import_data.get(key))
        if value is not None:
            setattr(imports, key, value)

    return ExportConfig(
        root=root,
        output=output,
        split_depth=split_depth,
        project_paths=_as_str_list(data.get("project_paths")),
        imports=imports,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["ConfigError", "ExportConfig", "ImportConfig", "default_config", "load_config"]
