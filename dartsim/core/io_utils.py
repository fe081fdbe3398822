"""
YAML files of the simulator: match settings in, match results out.

Both are written through a temporary file in the target directory and then
moved into place, so a settings file or a results log is either the old
version or the new one, never half written.
"""
import os
import yaml
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping
import logging

logger = logging.getLogger(__name__)


def atomic_write_yaml(filepath: Path, data: Mapping[str, Any]) -> None:
    """
    Write a YAML mapping atomically, creating parent directories.

    Keys keep their insertion order so saved settings read like the
    shipped config file.

    Args:
        filepath: Target file path
        data: Mapping of plain values (dicts, lists, numbers, strings, None)

    Raises:
        IOError: If the file cannot be written or data is not YAML-safe
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_path = tempfile.mkstemp(dir=filepath.parent, prefix=f".{filepath.stem}_", suffix=".tmp")

    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            yaml.safe_dump(dict(data), f, default_flow_style=False, sort_keys=False)
        os.replace(temp_path, filepath)
    except Exception as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        logger.error(f"Could not save {filepath}: {e}")
        raise IOError(f"Could not save {filepath}: {e}") from e

    logger.debug(f"Saved {filepath}")


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """
    Read a YAML settings file.

    Returns:
        Top-level mapping (empty for an empty file)

    Raises:
        FileNotFoundError: If file does not exist
        yaml.YAMLError: If file is malformed
        ValueError: If the top level is not a mapping of sections
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse {filepath}: {e}")
        raise

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{filepath} must hold a mapping of sections, got {type(data).__name__}")
    return data


def save_match_results(filepath: Path, results: Iterable[Mapping[str, Any]]) -> int:
    """
    Write finished matches (MatchResult.to_dict() values) under a results key.

    Returns:
        Number of matches written
    """
    results = [dict(r) for r in results]
    atomic_write_yaml(filepath, {"matches": len(results), "results": results})
    logger.info(f"Saved {len(results)} match results to {filepath}")
    return len(results)
