"""
Gray-Scott Parameter Presets

Each preset names an engine, parameter overrides known to produce a
recognizable regime, and the palette it looks best in. Anything not listed
in "params" keeps the engine default. Feed/kill pairs follow Pearson's
classification of the Gray-Scott parameter map.
"""

from types import MappingProxyType

from .gray_scott import GrayScott

_GS = GrayScott.engine_name

PRESETS = MappingProxyType({
    "coral": {
        "engine": _GS,
        "name": "Coral",
        "description": "Branching coral growth (the default regime)",
        "params": {"feed_rate": 0.055, "kill_rate": 0.062},
        "palette": "ocean",
    },
    "mitosis": {
        "engine": _GS,
        "name": "Mitosis",
        "description": "Spots that grow and divide like cells",
        "params": {"feed_rate": 0.0367, "kill_rate": 0.0649},
        "palette": "vapor",
    },
    "spots": {
        "engine": _GS,
        "name": "Spots",
        "description": "Stable isolated spots",
        "params": {"feed_rate": 0.035, "kill_rate": 0.065},
        "palette": "neon",
    },
    "worms": {
        "engine": _GS,
        "name": "Worms",
        "description": "Short wandering stripes",
        "params": {"feed_rate": 0.078, "kill_rate": 0.061},
        "palette": "earth",
    },
    "maze": {
        "engine": _GS,
        "name": "Maze",
        "description": "Labyrinth of winding stripes",
        "params": {"feed_rate": 0.029, "kill_rate": 0.057},
        "palette": "monochrome",
    },
    "waves": {
        "engine": _GS,
        "name": "Waves",
        "description": "Pulsing travelling waves",
        "params": {"feed_rate": 0.014, "kill_rate": 0.045},
        "palette": "fire",
    },
    "decay": {
        "engine": _GS,
        "name": "Decay",
        "description": "Every seed spot dies out",
        "params": {"feed_rate": 0.01, "kill_rate": 0.09},
        "palette": "monochrome",
    },
})

PRESET_ORDER = ("coral", "mitosis", "spots", "worms", "maze", "waves", "decay")


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def list_presets(engine=None):
    """Return list of (key, name, description) for presets.
    If engine is specified, filter to that engine only."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER
            if engine is None or PRESETS[k]["engine"] == engine]
