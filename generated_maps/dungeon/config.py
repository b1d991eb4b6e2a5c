import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

# Option keys as the map UI sends them
CAMEL_KEYS = {
    "roomMin": "room_min",
    "roomMax": "room_max",
    "straightBias": "straight_bias",
    "doorAttemptsPerRoom": "door_attempts_per_room",
    "removeDeadEnds": "remove_dead_ends",
    "deadEndMaxPasses": "dead_end_max_passes",
    "pruneMST": "prune_mst",
    "spurMaxLen": "spur_max_len",
}

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DungeonOptions:
    room_min: int = 3
    room_max: int = 11
    straight_bias: float = 0.85
    door_attempts_per_room: int = 8
    remove_dead_ends: bool = True
    dead_end_max_passes: int = 50
    prune_mst: bool = True
    spur_max_len: int = 0

    def normalized(self) -> "DungeonOptions":
        """Clamp every value into its legal range instead of rejecting it."""
        room_min = max(1, int(self.room_min))
        return replace(
            self,
            room_min=room_min,
            room_max=max(room_min, int(self.room_max)),
            straight_bias=min(1.0, max(0.0, float(self.straight_bias))),
            door_attempts_per_room=max(0, int(self.door_attempts_per_room)),
            remove_dead_ends=bool(self.remove_dead_ends),
            dead_end_max_passes=max(1, int(self.dead_end_max_passes)),
            prune_mst=bool(self.prune_mst),
            spur_max_len=max(0, int(self.spur_max_len)),
        )

    def merged(self, overrides: Optional[Mapping[str, Any]]) -> "DungeonOptions":
        """Return a copy with recognised keys (snake or camel case) replaced.

        Unknown keys are ignored and unparsable values keep the current value.
        """
        if not overrides:
            return self
        names = {f.name: f.type for f in fields(self)}
        changes: Dict[str, Any] = {}
        for key, raw in overrides.items():
            name = CAMEL_KEYS.get(key, key)
            if name not in names or raw is None:
                continue
            current = getattr(self, name)
            try:
                changes[name] = _coerce(raw, type(current))
            except (TypeError, ValueError, OverflowError):
                continue
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "DungeonOptions":
        return cls().merged(data)

    @classmethod
    def from_preset(cls, name: Optional[str]) -> "DungeonOptions":
        preset = PRESETS.get((name or "").strip().lower())
        return cls().merged(preset) if preset else cls()

    @classmethod
    def from_env(cls, base: Optional["DungeonOptions"] = None) -> "DungeonOptions":
        """Apply ``DUNGEON_*`` environment overrides on top of ``base``.

        ``DUNGEON_PRESET`` is applied first so the individual variables win.
        """
        opts = base or cls()
        preset = os.environ.get("DUNGEON_PRESET")
        if preset and preset.strip().lower() in PRESETS:
            opts = opts.merged(PRESETS[preset.strip().lower()])
        env_map = {
            "DUNGEON_ROOM_MIN": "room_min",
            "DUNGEON_ROOM_MAX": "room_max",
            "DUNGEON_STRAIGHT_BIAS": "straight_bias",
            "DUNGEON_DOOR_ATTEMPTS": "door_attempts_per_room",
            "DUNGEON_REMOVE_DEAD_ENDS": "remove_dead_ends",
            "DUNGEON_DEAD_END_MAX_PASSES": "dead_end_max_passes",
            "DUNGEON_PRUNE_MST": "prune_mst",
            "DUNGEON_SPUR_MAX_LEN": "spur_max_len",
        }
        found = {attr: os.environ[key] for key, attr in env_map.items() if key in os.environ}
        return opts.merged(found)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def as_camel_dict(self) -> Dict[str, Any]:
        snake = self.as_dict()
        return {camel: snake[name] for camel, name in CAMEL_KEYS.items()}


def _coerce(raw: Any, kind: type) -> Any:
    if kind is bool:
        if isinstance(raw, str):
            return raw.strip().lower() in _TRUE
        return bool(raw)
    if kind is int:
        if isinstance(raw, str):
            return int(float(raw.strip()))
        return int(raw)
    if kind is float:
        return float(raw)
    return raw


# Named option bundles offered by the map UI
PRESETS: Dict[str, Dict[str, Any]] = {
    "natural": {
        "remove_dead_ends": True,
        "dead_end_max_passes": 25,
        "prune_mst": True,
        "spur_max_len": 2,
    },
    "clean": {
        "remove_dead_ends": True,
        "dead_end_max_passes": 70,
        "prune_mst": True,
        "spur_max_len": 0,
    },
    "organic": {
        "remove_dead_ends": True,
        "dead_end_max_passes": 15,
        "prune_mst": True,
        "spur_max_len": 3,
    },
    "maze": {
        "remove_dead_ends": False,
        "dead_end_max_passes": 1,
        "prune_mst": False,
        "spur_max_len": 0,
    },
}


__all__ = ["DungeonOptions", "PRESETS", "CAMEL_KEYS"]
