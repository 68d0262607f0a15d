"""Locate and load .devlogrc configuration files."""

import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from devlog.models.config import Config

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".devlogrc", ".devlogrc.json")


def config_search_paths(
    cwd: Optional[Path] = None, home: Optional[Path] = None
) -> List[Path]:
    """Candidate config files, project directory first, then home."""
    project_dir = Path(cwd) if cwd is not None else Path.cwd()
    home_dir = Path(home) if home is not None else Path.home()
    return [project_dir / name for name in CONFIG_FILENAMES] + [
        home_dir / name for name in CONFIG_FILENAMES
    ]


def _validate_settings(data: dict, path: Path) -> Config:
    """Build a Config, dropping settings that fail validation."""
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        invalid = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
    for name, field in Config.model_fields.items():
        if name in invalid or field.alias in invalid:
            invalid.update(key for key in (name, field.alias) if key)
    logger.debug("Ignoring invalid settings %s in %s", sorted(invalid), path)
    return Config.model_validate(
        {key: value for key, value in data.items() if key not in invalid}
    )


def load_config(cwd: Optional[Path] = None, home: Optional[Path] = None) -> Config:
    """Load the first usable config file, falling back to defaults."""
    for path in config_search_paths(cwd, home):
        if not path.is_file():
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("config root is not a JSON object")
            config = _validate_settings(data, path)
        except (OSError, ValueError, ValidationError) as e:
            logger.debug("Ignoring config file %s: %s", path, e)
            continue
        logger.debug("Loaded config from %s", path)
        return config
    logger.debug("No config file found, using defaults")
    return Config()


def sample_config() -> str:
    """Contents written by ``devlog init``."""
    defaults = Config()
    sample = {
        "format": defaults.format.value,
        "useCopilot": defaults.use_copilot,
        "showFiles": defaults.show_files,
        "showStats": defaults.show_stats,
        "maxCommits": defaults.max_commits,
    }
    return json.dumps(sample, indent=2)
