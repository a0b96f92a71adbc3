"""YAML helpers for parameter files and derived-config dumps.

Uses PyYAML ``safe_load``/``safe_dump`` only.

Usage:
    from trace_params.utils import fs
    data = fs.load_yaml("params.yaml")
    text = fs.dump_yaml(engine_cfg.to_dict())
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


def load_yaml(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    dict or None
        Parsed YAML content; None for an empty file

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails or the file is not valid UTF-8
    OSError
        If the file exists but cannot be read (e.g. it is a directory)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise yaml.YAMLError(f"YAML file {path} is not valid UTF-8: {e}") from e


def dump_yaml(obj: Any) -> str:
    """Serialize plain data to a YAML string, preserving key order."""
    return yaml.safe_dump(
        obj,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True
    )
