from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from poddiag.core.constants import DEFAULT_CONSTANTS, DeviceConstants
from poddiag.core.reference import DEFAULT_LABEL


CONFIG_FILE_NAME = "poddiag.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    constants: DeviceConstants = DEFAULT_CONSTANTS
    ref_label: str = DEFAULT_LABEL
    config_dir: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "pulse_size": self.constants.pulse_size,
            "maximum_reservoir_reading": self.constants.maximum_reservoir_reading,
            "ref_label": self.ref_label,
            "config_dir": str(self.config_dir) if self.config_dir is not None else None,
        }


def _xdg_config_home() -> Path:
    env = (os.getenv("XDG_CONFIG_HOME", "") or "").strip()
    if env:
        return Path(env).expanduser()
    return Path("~/.config").expanduser()


def config_dir_path(config_dir: str | Path | None = None) -> Path:
    if config_dir is not None:
        return Path(config_dir).expanduser()
    env = (os.getenv("PODDIAG_CONFIG_DIR", "") or "").strip()
    if env:
        return Path(env).expanduser()
    return _xdg_config_home() / "poddiag"


def load_settings(
    *,
    config_dir: str | Path | None = None,
    pulse_size: float | None = None,
    maximum_reservoir_reading: float | None = None,
    ref_label: str | None = None,
) -> Settings:
    """Resolve decoder settings.

    Precedence (highest to lowest):
    1) explicit parameters (typically CLI)
    2) env vars PODDIAG_PULSE_SIZE, PODDIAG_MAX_RESERVOIR, PODDIAG_REF_LABEL
    3) poddiag.json in the config dir
    4) device defaults (0.05 U pulses, 50 U maximum reservoir reading, "Ref")
    """

    cfg = config_dir_path(config_dir)
    file_values = _read_config_file(cfg / CONFIG_FILE_NAME)

    size = _pick_float("pulse_size", pulse_size, "PODDIAG_PULSE_SIZE", file_values, DEFAULT_CONSTANTS.pulse_size)
    maximum = _pick_float(
        "maximum_reservoir_reading",
        maximum_reservoir_reading,
        "PODDIAG_MAX_RESERVOIR",
        file_values,
        DEFAULT_CONSTANTS.maximum_reservoir_reading,
    )

    label = ref_label
    if label is None:
        label = (os.getenv("PODDIAG_REF_LABEL", "") or "").strip() or None
    if label is None:
        v = file_values.get("ref_label")
        if v is not None and (not isinstance(v, str) or not v.strip()):
            raise ConfigError("ref_label must be a non-empty string")
        label = v.strip() if isinstance(v, str) else None
    if label is None:
        label = DEFAULT_LABEL

    try:
        constants = DeviceConstants(pulse_size=size, maximum_reservoir_reading=maximum)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    return Settings(constants=constants, ref_label=label, config_dir=cfg)


def write_default_config(path: Path, *, data: dict[str, Any] | None = None) -> None:
    payload = data if data is not None else {
        "pulse_size": DEFAULT_CONSTANTS.pulse_size,
        "maximum_reservoir_reading": DEFAULT_CONSTANTS.maximum_reservoir_reading,
        "ref_label": DEFAULT_LABEL,
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, sort_keys=True, indent=2) + "\n", encoding="utf-8")


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid json") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: failed to read") from exc
    if not isinstance(obj, dict):
        raise ConfigError(f"{path}: expected json object")
    unknown = set(obj.keys()) - {"pulse_size", "maximum_reservoir_reading", "ref_label"}
    if unknown:
        raise ConfigError(f"{path}: unknown keys: {', '.join(sorted(unknown))}")
    return obj


def _pick_float(key: str, explicit: float | None, env_name: str, file_values: dict[str, Any], default: float) -> float:
    if explicit is not None:
        return float(explicit)
    env = (os.getenv(env_name, "") or "").strip()
    if env:
        try:
            return float(env)
        except ValueError as exc:
            raise ConfigError(f"{env_name} must be a number") from exc
    v = file_values.get(key)
    if v is None:
        return float(default)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ConfigError(f"{key} must be a number")
    return float(v)
