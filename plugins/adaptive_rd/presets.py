"""
Gray-Scott Parameter Presets

Each preset is a partial parameter record (serialized keys, as in saved
settings files) plus a display name and description. Keys a preset does
not set keep their default values. Optional session keys (stepsPerFrame,
viewMode, ...) are applied to the viewer/session when present.

Feed/kill pairs follow the classic Pearson regimes.
"""

PRESETS = {
    "default": {
        "name": "Default",
        "description": "Slow worm growth from the central square",
        "Du": 0.16, "Dv": 0.08, "F": 0.035, "K": 0.06,
        "dtMin": 0.2, "dtMax": 1.5, "tempScale": 0.08,
        "emaAlpha": 0.8, "energyMode": "react", "mixAlpha": 0.5,
    },
    "mitosis": {
        "name": "Mitosis",
        "description": "Spots that grow and divide",
        "F": 0.0367, "K": 0.0649,
        "energyMode": "react",
    },
    "coral": {
        "name": "Coral",
        "description": "Branching coral growth",
        "F": 0.0545, "K": 0.062,
        "energyMode": "grad", "tempScale": 0.15,
    },
    "worms": {
        "name": "Worms",
        "description": "Long meandering stripes",
        "F": 0.046, "K": 0.063,
        "energyMode": "mix", "mixAlpha": 0.6,
    },
    "spots": {
        "name": "Spots",
        "description": "Stable hexagonal spot lattice",
        "F": 0.03, "K": 0.062,
        "energyMode": "react", "emaAlpha": 0.9,
    },
    "pulse": {
        "name": "Pulse",
        "description": "Activity-driven timestep, pulsing fronts",
        "F": 0.025, "K": 0.06,
        "energyMode": "time", "tempScale": 0.2,
        "dtMin": 0.1, "dtMax": 1.2,
        "viewMode": "dt",
    },
    "waves": {
        "name": "Waves",
        "description": "Travelling waves with a sharp energy contrast",
        "F": 0.014, "K": 0.045,
        "energyMode": "grad", "tempScale": 0.04,
        "stepsPerFrame": 10,
    },
    "uniform": {
        "name": "Uniform dt",
        "description": "dtMin = dtMax: plain fixed-step Gray-Scott",
        "F": 0.035, "K": 0.06,
        "dtMin": 1.0, "dtMax": 1.0,
    },
}

PRESET_ORDER = ["default", "mitosis", "coral", "worms", "spots", "pulse",
                "waves", "uniform"]

# Keys of a preset that are not parameter or session values
_META_KEYS = ("name", "description")


def get_preset(key):
    """Get a preset dict by key. Returns None if not found."""
    return PRESETS.get(key)


def preset_values(key):
    """Parameter/session keys of a preset, without name/description."""
    preset = PRESETS[key]
    return {k: v for k, v in preset.items() if k not in _META_KEYS}


def list_presets():
    """Return [(key, name, description), ...] in display order."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER]
