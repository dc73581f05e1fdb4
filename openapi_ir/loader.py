"""Reading and writing OpenAPI / IR documents on disk."""

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .ir_logging import get_logger

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def load_openapi_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Load an OpenAPI document from YAML or JSON."""
    path = Path(path)
    content = path.read_text(encoding="utf-8")

    if path.suffix in YAML_SUFFIXES:
        data = yaml.safe_load(content)
    elif path.suffix == ".json":
        data = json.loads(content)
    else:
        # Try YAML first, then JSON
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError:
            data = json.loads(content)

    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain an OpenAPI document object")
    logger.debug(f"[IR] loaded {path}")
    return data


def dump_document(data: Any, path: Union[str, Path]) -> Path:
    """Write `data` as YAML or JSON depending on the file suffix."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix in YAML_SUFFIXES:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    path.write_text(text, encoding="utf-8")
    return path
