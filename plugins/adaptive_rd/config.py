"""
Simulation Configuration

Grid defaults, numeric thresholds and the parameter record shared by the
energy field, the timestep map and the integrator.

The record serializes with the short keys used by saved settings files
(F, K, dtMin, tempScale, ...) while the Python attributes use readable
names (feed, kill, dt_min, temp_scale, ...). Either spelling is accepted
on input.
"""

import enum

from pydantic import BaseModel, ConfigDict, Field


# Grid defaults (W x H cells, row-major, index = x + y*W)
GRID_W = 220
GRID_H = 220

# Central disturbance written by seed(): offsets -12..+12 -> 25x25 square
SEED_HALF = 12

# Below this max energy the normalized field is treated as all-zero
ENERGY_EPS = 1e-8
# Temperature floor for exp(-e/T)
TEMP_FLOOR = 1e-6

# Range accepted for dt bounds coming from settings / widgets
DT_BOUND_MIN = 0.001
DT_BOUND_MAX = 10.0

# Largest brush radius in cells
BRUSH_RADIUS_MAX = 50

# Mosaic layout used by tile mode (columns x rows)
TILE_COLS = 8
TILE_ROWS = 4


class EnergyMode(str, enum.Enum):
    """Per-cell energy metric driving the local timestep."""
    react = "react"
    time = "time"
    grad = "grad"
    mix = "mix"


class ViewMode(str, enum.Enum):
    """Buffer shown by the renderer."""
    V = "V"
    U = "U"
    dt = "dt"
    E = "E"


class BrushMode(str, enum.Enum):
    """Fill written by the painting interface."""
    V = "V"
    U = "U"
    UV = "UV"
    erase = "erase"


ENERGY_ORDER = [m.value for m in EnergyMode]
VIEW_ORDER = [m.value for m in ViewMode]
BRUSH_ORDER = [m.value for m in BrushMode]


class RDParams(BaseModel):
    """Gray-Scott + adaptive timestep parameters.

    Records are treated as values: use merged() to derive an updated copy
    rather than mutating one that an integrator already holds.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        allow_inf_nan=False,
        validate_assignment=True,
    )

    # Gray-Scott reaction parameters
    Du: float = Field(default=0.16, description="Diffusion rate of U")
    Dv: float = Field(default=0.08, description="Diffusion rate of V")
    feed: float = Field(default=0.035, alias="F", description="Feed rate")
    kill: float = Field(default=0.06, alias="K", description="Kill rate")

    # Dynamic timestep hierarchy (bounds may be given in either order)
    dt_min: float = Field(default=0.2, alias="dtMin",
                          description="Timestep at maximum energy")
    dt_max: float = Field(default=1.5, alias="dtMax",
                          description="Timestep at zero energy")
    temp_scale: float = Field(default=0.08, alias="tempScale",
                              description="Temperature T in exp(-E/T)")

    # Energy computation
    ema_alpha: float = Field(default=0.8, ge=0.0, lt=1.0, alias="emaAlpha",
                             description="Energy smoothing factor")
    energy_mode: EnergyMode = Field(default=EnergyMode.react, alias="energyMode",
                                    description="Energy metric")
    mix_alpha: float = Field(default=0.5, ge=0.0, le=1.0, alias="mixAlpha",
                             description="react weight in the mix metric")

    def merged(self, **changes):
        """Return a validated copy with any subset of fields replaced.

        Keys may be attribute names or serialized keys; unknown keys are
        ignored.
        """
        data = self.model_dump()
        for key, value in changes.items():
            name = _PARAM_KEYS.get(key)
            if name is not None:
                data[name] = value
        return RDParams.model_validate(data)

    @property
    def dt_bounds(self):
        """(lo, hi) of the unordered dt pair."""
        return min(self.dt_min, self.dt_max), max(self.dt_min, self.dt_max)

    def to_dict(self):
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, indent=None):
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, text):
        return cls.model_validate_json(text)


# Attribute name and serialized key -> attribute name
_PARAM_KEYS = {}
for _name, _field in RDParams.model_fields.items():
    _PARAM_KEYS[_name] = _name
    if _field.alias:
        _PARAM_KEYS[_field.alias] = _name


def param_key(key):
    """Normalize an attribute name or serialized key to the attribute name."""
    return _PARAM_KEYS.get(key)


DEFAULT_PARAMS = RDParams()
