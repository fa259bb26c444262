"""Persisted editor settings and the per-session configuration value."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from tile_editor.grid.charset import DEFAULT_VALIDATOR, CharacterValidator
from tile_editor.grid.dimensions import ConfigurationError, GridDimensions
from tile_editor.runtime import telemetry

CONFIG_ENV = "TILE_EDITOR_CONFIG"

COLUMN_RANGE = (10, 40)
ROW_RANGE = (2, 20)

# dataclass field -> JSON key
_JSON_KEYS: Dict[str, str] = {
    "max_columns": "maxColumns",
    "max_rows": "maxRows",
    "max_columns_ext": "maxColumnsExt",
    "max_rows_ext": "maxRowsExt",
    "font_size": "fontSize",
    "font_family": "fontFamily",
    "last_selected_folder": "lastSelectedFolder",
    "is_simple_mode": "isSimpleMode",
}


class GridProfile(str, Enum):
    BASIC = "basic"
    EXTENDED = "extended"


def default_config_path() -> Path:
    override = os.getenv(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "tile_editor" / "config.json"


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Everything an edit session needs, fixed for the session lifetime."""

    dimensions: GridDimensions
    profile: GridProfile = GridProfile.BASIC
    validator: CharacterValidator = DEFAULT_VALIDATOR

    @classmethod
    def of(
        cls, rows: int, columns: int, *, profile: GridProfile = GridProfile.BASIC
    ) -> "SessionConfig":
        dimensions = GridDimensions(rows=rows, columns=columns)
        return cls(dimensions=dimensions, profile=profile)

    @property
    def rows(self) -> int:
        return self.dimensions.rows

    @property
    def columns(self) -> int:
        return self.dimensions.columns


@dataclass
class AppConfig:
    """User settings persisted as camelCase JSON between runs."""

    max_columns: int = 14
    max_rows: int = 7
    max_columns_ext: int = 28
    max_rows_ext: int = 8
    font_size: float = 14.0
    font_family: str = "Consolas"
    last_selected_folder: str = ""
    is_simple_mode: bool = True
    path: Optional[Path] = field(default=None, repr=False, compare=False)

    @property
    def active_profile(self) -> GridProfile:
        return GridProfile.BASIC if self.is_simple_mode else GridProfile.EXTENDED

    def dimensions(self, profile: Optional[GridProfile] = None) -> GridDimensions:
        profile = profile or self.active_profile
        if profile is GridProfile.EXTENDED:
            return GridDimensions(rows=self.max_rows_ext, columns=self.max_columns_ext)
        return GridDimensions(rows=self.max_rows, columns=self.max_columns)

    def session_config(self, profile: Optional[GridProfile] = None) -> SessionConfig:
        profile = profile or self.active_profile
        return SessionConfig(dimensions=self.dimensions(profile), profile=profile)

    def update_grid(
        self,
        profile: GridProfile,
        *,
        rows: Optional[int] = None,
        columns: Optional[int] = None,
    ) -> None:
        if columns is not None:
            _check_range("columns", columns, COLUMN_RANGE)
        if rows is not None:
            _check_range("rows", rows, ROW_RANGE)
        if profile is GridProfile.EXTENDED:
            if columns is not None:
                self.max_columns_ext = columns
            if rows is not None:
                self.max_rows_ext = rows
        else:
            if columns is not None:
                self.max_columns = columns
            if rows is not None:
                self.max_rows = rows

    def reset_to_defaults(self) -> None:
        defaults = AppConfig()
        self.max_columns = defaults.max_columns
        self.max_rows = defaults.max_rows
        self.max_columns_ext = defaults.max_columns_ext
        self.max_rows_ext = defaults.max_rows_ext
        self.font_size = defaults.font_size
        self.font_family = defaults.font_family

    def to_json(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("path", None)
        return {_JSON_KEYS[key]: value for key, value in data.items()}

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "AppConfig":
        known = {f.name: f for f in fields(cls) if f.name in _JSON_KEYS}
        values: Dict[str, Any] = {}
        for name, key in _JSON_KEYS.items():
            if key in data:
                values[name] = _coerce(known[name].type, data[key])
        return cls(**values)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "AppConfig":
        """Read settings from ``path``, writing defaults there if it is missing.

        A corrupt or unreadable file never aborts start-up: the problem is
        logged and defaults are returned instead.
        """

        target = Path(path) if path is not None else default_config_path()
        if not target.exists():
            config = cls(path=target)
            config.save()
            return config
        try:
            raw = json.loads(target.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("configuration root must be an object")
            config = cls.from_json(raw)
        except (OSError, ValueError, TypeError) as exc:
            telemetry.record_event(
                "config.load_failed",
                level="warning",
                data={"path": str(target), "error": str(exc)},
            )
            config = cls()
        config.path = target
        return config

    def save(self, path: Optional[Path] = None) -> None:
        target = Path(path) if path is not None else self.path
        if target is None:
            target = default_config_path()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(self.to_json(), indent=2), encoding="utf-8")
        except OSError as exc:
            telemetry.record_event(
                "config.save_failed",
                level="warning",
                data={"path": str(target), "error": str(exc)},
            )
            return
        self.path = target


def _check_range(label: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{label} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise ConfigurationError(
            f"{label} must be within {low}..{high}, got {value!r}"
        )


def _coerce(annotation: Any, value: Any) -> Any:
    kind = str(annotation)
    if kind == "int":
        return int(value)
    if kind == "float":
        return float(value)
    if kind == "bool":
        if not isinstance(value, bool):
            raise TypeError(f"expected a JSON boolean, got {value!r}")
        return value
    if kind == "str":
        return str(value)
    return value


__all__ = [
    "AppConfig",
    "CONFIG_ENV",
    "GridProfile",
    "SessionConfig",
    "default_config_path",
]
