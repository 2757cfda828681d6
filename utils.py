import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def load_yaml(file_path: Union[str, Path]) -> Dict:
    with open(file_path, "r") as file:
        data = yaml.safe_load(file)
    return data or {}


def load_json(file_path: Union[str, Path]) -> Any:
    with open(file_path, "r") as file:
        return json.load(file)


def to_bool(value: Any) -> bool:
    """Interpret an environment-style flag ("1", "true", "yes", "on")."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}
