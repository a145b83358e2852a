"""
config.py - Resolve the archive paths.

Precedence, per field:
  1. Environment: OED_DATA_PATH, OED_INDEX_PATH, OED_TRIE_PATH
  2. The first readable config file among:
       ./oed_config.json, ./oed_config.yaml
       ~/.oed_mcp/config.json, ~/.oed_mcp/config.yaml
       /etc/oed_mcp/config.json, /etc/oed_mcp/config.yaml

Config files hold `data_path`, `index_path` and optionally `trie_path`.
JSON and YAML are chosen by file suffix.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import orjson
import yaml

from oedlex.errors import ConfigurationMissing, ResourceUnavailable


logger = logging.getLogger(__name__)


ENV_VARS = {
    'data_path': 'OED_DATA_PATH',
    'index_path': 'OED_INDEX_PATH',
    'trie_path': 'OED_TRIE_PATH',
}


@dataclass(frozen=True)
class Config:
    data_path: Path
    index_path: Path
    trie_path: Optional[Path] = None


def default_search_paths() -> List[Path]:
    paths = [Path('oed_config.json'), Path('oed_config.yaml')]
    try:
        home = Path.home()
    except RuntimeError:
        home = None
    if home is not None:
        paths += [home / '.oed_mcp' / 'config.json', home / '.oed_mcp' / 'config.yaml']
    paths += [Path('/etc/oed_mcp/config.json'), Path('/etc/oed_mcp/config.yaml')]
    return paths


def load_config_file(path: Path) -> Dict:
    """Parse one config file; YAML for .yaml/.yml, JSON otherwise."""
    with open(path, 'rb') as f:
        raw = f.read()
    if path.suffix in ('.yaml', '.yml'):
        data = yaml.safe_load(raw)
    else:
        data = orjson.loads(raw)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a mapping, got {type(data).__name__}")
    return data


def _from_files(search_paths: List[Path]) -> Dict:
    for path in search_paths:
        if not path.is_file():
            continue
        try:
            data = load_config_file(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable config file {path}: {e}")
            continue
        logger.debug(f"Loaded config from {path}")
        return data
    return {}


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    search_paths: Optional[List[Path]] = None
) -> Config:
    """
    Resolve and validate the archive paths.

    Raises:
        ConfigurationMissing: data or index path not configured anywhere
        ResourceUnavailable: a configured path is not an existing file
    """
    if environ is None:
        environ = os.environ
    if search_paths is None:
        search_paths = default_search_paths()

    values = {field: environ.get(var) or None for field, var in ENV_VARS.items()}

    if not all(values.values()):
        file_values = _from_files(search_paths)
        for field in ENV_VARS:
            if not values[field] and file_values.get(field):
                values[field] = str(file_values[field])

    if not values['data_path'] or not values['index_path']:
        raise ConfigurationMissing(
            "OED data paths not configured. Please set OED_DATA_PATH and "
            "OED_INDEX_PATH environment variables or create a config file"
        )

    config = Config(
        data_path=Path(values['data_path']).expanduser(),
        index_path=Path(values['index_path']).expanduser(),
        trie_path=Path(values['trie_path']).expanduser() if values['trie_path'] else None,
    )

    if not config.data_path.is_file():
        raise ResourceUnavailable(f"OED data file not found at: {config.data_path}")
    if not config.index_path.is_file():
        raise ResourceUnavailable(f"OED index file not found at: {config.index_path}")
    if config.trie_path is not None and not config.trie_path.is_file():
        raise ResourceUnavailable(f"OED trie file not found at: {config.trie_path}")

    return config
