"""
Settings Persistence

Saves and loads the simulation parameters together with the viewer's
session settings as one flat JSON object:

  {"Du": 0.16, "Dv": 0.08, "F": 0.035, "K": 0.06, "dtMin": 0.2,
   "dtMax": 1.5, "tempScale": 0.08, "emaAlpha": 0.8, "energyMode": "react",
   "mixAlpha": 0.5, "stepsPerFrame": 6, "brushRadius": 10,
   "brushMode": "V", "viewMode": "V", "tileMode": false}

Loading is forgiving: any value that is missing, unparsable, non-finite or
not one of the known selectors falls back to the default for that key, and
the dt bounds are clamped to a sane range, so the core only ever receives
finite parameters.
"""

import json
import math
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .config import (
    RDParams, BrushMode, ViewMode, EnergyMode,
    DT_BOUND_MIN, DT_BOUND_MAX, BRUSH_RADIUS_MAX,
)


DEFAULT_SETTINGS_PATH = Path.home() / ".adaptive_rd" / "settings.json"


class SessionSettings(BaseModel):
    """Host-side settings: pacing, brush and display."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    steps_per_frame: int = Field(default=6, ge=1, alias="stepsPerFrame",
                                 description="Ticks run per displayed frame")
    brush_radius: int = Field(default=10, ge=0, le=BRUSH_RADIUS_MAX,
                              alias="brushRadius")
    brush_mode: BrushMode = Field(default=BrushMode.V, alias="brushMode")
    view_mode: ViewMode = Field(default=ViewMode.V, alias="viewMode")
    tile_mode: bool = Field(default=False, alias="tileMode",
                            description="Show the field as an 8x4 mosaic")

    def merged(self, **changes):
        data = self.model_dump()
        for key, value in changes.items():
            name = _SESSION_KEYS.get(key)
            if name is not None:
                data[name] = value
        return SessionSettings.model_validate(data)


_SESSION_KEYS = {}
for _name, _field in SessionSettings.model_fields.items():
    _SESSION_KEYS[_name] = _name
    if _field.alias:
        _SESSION_KEYS[_field.alias] = _name


def _lookup(data, name, field):
    if field.alias and field.alias in data:
        return data[field.alias]
    return data.get(name)


def _finite_float(value, default):
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def _int_at_least(value, default, lowest):
    value = _finite_float(value, None)
    if value is None:
        return default
    return max(lowest, int(value))


def _choice(value, enum_cls, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _clamp(x, lo, hi):
    return lo if x < lo else hi if x > hi else x


def sanitize_settings(data, params=None, session=None):
    """Build (RDParams, SessionSettings) from a loosely-typed dict.

    params/session supply the per-key fallbacks (defaults if omitted).
    """
    params = params if params is not None else RDParams()
    session = session if session is not None else SessionSettings()

    p = {}
    for name, field in RDParams.model_fields.items():
        raw = _lookup(data, name, field)
        current = getattr(params, name)
        if name == "energy_mode":
            p[name] = current if raw is None else _choice(raw, EnergyMode, current)
        else:
            p[name] = current if raw is None else _finite_float(raw, current)

    p["dt_min"] = _clamp(p["dt_min"], DT_BOUND_MIN, DT_BOUND_MAX)
    p["dt_max"] = _clamp(p["dt_max"], DT_BOUND_MIN, DT_BOUND_MAX)
    p["ema_alpha"] = _clamp(p["ema_alpha"], 0.0, 0.99)
    p["mix_alpha"] = _clamp(p["mix_alpha"], 0.0, 1.0)

    s = {}
    fields = SessionSettings.model_fields
    raw = _lookup(data, "steps_per_frame", fields["steps_per_frame"])
    s["steps_per_frame"] = _int_at_least(raw, session.steps_per_frame, 1)
    raw = _lookup(data, "brush_radius", fields["brush_radius"])
    s["brush_radius"] = min(BRUSH_RADIUS_MAX,
                            _int_at_least(raw, session.brush_radius, 0))
    raw = _lookup(data, "brush_mode", fields["brush_mode"])
    s["brush_mode"] = _choice(raw, BrushMode, session.brush_mode)
    raw = _lookup(data, "view_mode", fields["view_mode"])
    s["view_mode"] = _choice(raw, ViewMode, session.view_mode)
    raw = _lookup(data, "tile_mode", fields["tile_mode"])
    s["tile_mode"] = raw if isinstance(raw, bool) else session.tile_mode

    return RDParams.model_validate(p), SessionSettings.model_validate(s)


def settings_to_dict(params, session=None):
    """Flat dict of serialized parameter and session keys."""
    data = params.to_dict()
    if session is not None:
        data.update(session.model_dump(mode="json", by_alias=True))
    return data


def save_settings(path, params, session=None):
    """Write settings as indented JSON. Returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings_to_dict(params, session), indent=2))
    return path


def load_settings(path, params=None, session=None):
    """Read a settings file -> (RDParams, SessionSettings).

    Missing files raise OSError and malformed JSON raises ValueError; bad
    individual values fall back to params/session (or the defaults).
    """
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} does not hold a JSON object")
    return sanitize_settings(data, params, session)


def reset_settings(path=DEFAULT_SETTINGS_PATH):
    """Remove a stored settings file. Returns True if one was removed."""
    path = Path(path)
    if path.exists():
        path.unlink()
        return True
    return False
