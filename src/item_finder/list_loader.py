"""
Candidate list loader for the CLI.
Loads records from a JSON or YAML file.
"""

from pathlib import Path

import yaml
from loguru import logger

from shared.exceptions import InputError


def load_records(path: Path) -> list[dict]:
    """
    Load a list of records from a JSON or YAML file.

    The file holds either a list of mappings or a mapping with an
    "items" key holding that list. JSON is parsed as YAML.
    """
    if not path.exists():
        raise InputError(f"List file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InputError(f"Could not parse list file {path}: {e}") from e

    if isinstance(data, dict) and "items" in data:
        data = data["items"]

    if not isinstance(data, list):
        raise InputError(f"List file must contain a list of items: {path}")

    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise InputError(f"Item #{index} in {path} is not a mapping")

    logger.debug(f"Loaded {len(data)} items from {path}")
    return data
