"""YAML handling for scene configuration files.

Provides:
    - load_yaml(): safe YAML parsing with file-not-found / parse errors surfaced
    - dump_yaml(): deterministic YAML text (insertion order kept, no flow style)

Scene generation itself never touches the filesystem; only config loading
and CLI output go through this module.

All paths use pathlib.Path for cross-platform compatibility.

Usage:
    from src.utils import fs
    data = fs.load_yaml("configs/space_paint/scene.v1.yaml")
    print(fs.dump_yaml(scene.to_dict()))

Note: Module named `fs.py` rather than `io.py` to avoid shadowing stdlib `io`.
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails

    Notes
    -----
    Uses safe_load to prevent arbitrary code execution.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e


def dump_yaml(obj: Any) -> str:
    """Serialize object to YAML text.

    Parameters
    ----------
    obj : Any
        Python object (dict, list, primitives)

    Returns
    -------
    str
        YAML document

    Notes
    -----
    Uses PyYAML safe_dump; keys keep insertion order so output is stable
    for identical inputs.
    """
    return yaml.safe_dump(
        obj,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True
    )
