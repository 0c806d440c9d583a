"""Save and load orchestrator settings as YAML"""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from ..core.config import DelveSettings
from ..exceptions import ConfigurationError
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(".delve/config.yaml")


def export_config(
    settings: DelveSettings,
    output_path: Optional[Path] = None,
    only_changed: bool = False,
) -> Path:
    """
    Write settings to a YAML file.

    Args:
        settings: Settings to export
        output_path: Destination (default: .delve/config.yaml)
        only_changed: Write only the values that differ from the defaults

    Returns:
        Path of the written file
    """
    output_path = output_path or DEFAULT_CONFIG_PATH
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = settings.model_dump(
        exclude_none=True, exclude_defaults=only_changed, mode="json"
    )

    with output_path.open("w") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=True, indent=2)

    logger.info("config_exported", path=str(output_path), keys=len(config_dict))
    return output_path


def import_config(config_path: Path) -> DelveSettings:
    """
    Build settings from a YAML file written by ``export_config``.

    Keys that are not settings are ignored with a warning. Environment
    variables still apply to keys the file does not set.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file is not a mapping or holds an invalid value
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        config_dict = yaml.safe_load(f) or {}

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Config file must contain a mapping, got {type(config_dict).__name__}"
        )

    unknown = sorted(set(config_dict) - set(DelveSettings.model_fields))
    if unknown:
        logger.warning("config_keys_ignored", path=str(config_path), keys=unknown)

    try:
        settings = DelveSettings(**config_dict)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        raise ConfigurationError(
            f"{field}: {error['msg']}" if field else error["msg"],
            field=field,
            value=error.get("input"),
        ) from e

    logger.info("config_loaded", path=str(config_path))
    return settings
