"""
Configuration: a JSON file, by default ~/.device-bridge/config.json.

    {
      "remote": {"timeout": 10},
      "platform": {"url": "http://thingspanel.local/api/v1", "service_identifier": "xiaozhi"},
      "log": {"level": "INFO"}
    }
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

import pydantic
from pydantic import BaseModel, Field

from device_bridge.errors import ValidationError
from device_bridge.platform import DEFAULT_STATUS_PATH
from device_bridge.transport.http import DEFAULT_TIMEOUT

CONFIG_ENV = "DEVICE_BRIDGE_CONFIG"
CONFIG_FILE = Path.home() / ".device-bridge" / "config.json"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RemoteConfig(BaseModel):
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)


class PlatformConfig(BaseModel):
    """Host platform the offline status is pushed to."""
    url: str = ""
    status_path: str = DEFAULT_STATUS_PATH
    service_identifier: str = ""
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)


class LogConfig(BaseModel):
    level: str = "INFO"


class BridgeConfig(BaseModel):
    remote: RemoteConfig = RemoteConfig()
    platform: PlatformConfig = PlatformConfig()
    log: LogConfig = LogConfig()
    form_asset: Optional[Path] = None


def config_path() -> Path:
    env = os.environ.get(CONFIG_ENV)
    return Path(env) if env else CONFIG_FILE


def load_config(path: Optional[Union[str, Path]] = None) -> BridgeConfig:
    """Load the config file. A missing file means defaults; a broken one is an error."""
    path = Path(path) if path else config_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return BridgeConfig()
    try:
        return BridgeConfig.model_validate(json.loads(raw))
    except (json.JSONDecodeError, pydantic.ValidationError) as e:
        raise ValidationError(f"invalid config file {path}: {e}") from e


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
