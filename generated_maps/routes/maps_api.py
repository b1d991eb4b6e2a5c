"""
project: Generated Maps
module: maps_api.py
License: MIT

Map generation API routes.

Endpoints return JSON built from the immutable generation results; the
ASCII endpoint is a plain-text diagnostic dump. Generation parameters never
produce a 4xx: unparsable numbers fall back to defaults and ranges are
clamped.
"""

import hashlib
import random
import threading

from flask import Blueprint, Response, current_app, jsonify, request

from generated_maps.dungeon import PRESETS, DungeonOptions, generate_map, render_ascii, summary_line
from generated_maps.dungeon.config import CAMEL_KEYS
from generated_maps.logging_utils import get_logger

log = get_logger("maps_api")

bp_maps = Blueprint("maps", __name__)

ALGORITHMS = ("donjon", "bsp")
SIZE_MIN, SIZE_MAX = 20, 1000
ROOMS_MIN, ROOMS_MAX = 3, 50
DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_ROOMS = 80, 60, 8
SEED_MAX = 2**63 - 1

OPTION_KEYS = set(CAMEL_KEYS) | set(CAMEL_KEYS.values())


def _coerce_seed(raw):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if raw is None or isinstance(raw, bool):
        return random.randint(1, 1_000_000)
    if isinstance(raw, int):
        return raw % SEED_MAX
    if isinstance(raw, float):
        return int(raw) % SEED_MAX
    s = str(raw).strip()
    if not s:
        return random.randint(1, 1_000_000)
    if s.lstrip("-").isdigit():
        return int(s) % SEED_MAX
    h = hashlib.sha256(s.encode("utf-8")).digest()
    return int.from_bytes(h[:8], "big") % SEED_MAX


def _clamped_int(raw, default: int, lo: int, hi: int) -> int:
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(lo, min(hi, value))


def _params():
    """Query args merged with a JSON body (body wins)."""
    params = request.args.to_dict()
    if request.method == "POST":
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            params.update(body)
    return params


def _options(params) -> DungeonOptions:
    opts = DungeonOptions.from_env()
    preset = str(params.get("preset") or "").strip().lower()
    if preset in PRESETS:
        opts = opts.merged(PRESETS[preset])
    nested = params.get("options")
    if isinstance(nested, dict):
        opts = opts.merged(nested)
    return opts.merged({k: v for k, v in params.items() if k in OPTION_KEYS}).normalized()


def resolve_request(params):
    """Normalize request parameters into generation inputs."""
    algorithm = str(params.get("algorithm") or current_app.config.get("MAPS_DEFAULT_ALGORITHM", "donjon"))
    algorithm = algorithm.strip().lower()
    if algorithm not in ALGORITHMS:
        algorithm = "bsp"
    return {
        "algorithm": algorithm,
        "width": _clamped_int(params.get("width"), DEFAULT_WIDTH, SIZE_MIN, SIZE_MAX),
        "height": _clamped_int(params.get("height"), DEFAULT_HEIGHT, SIZE_MIN, SIZE_MAX),
        "rooms": _clamped_int(params.get("rooms"), DEFAULT_ROOMS, ROOMS_MIN, ROOMS_MAX),
        "seed": _coerce_seed(params.get("seed")),
        "options": _options(params),
    }


# Simple in-process cache of finished (immutable) results keyed by every generation input.
_map_cache = {}
_map_cache_lock = threading.Lock()


def clear_cache() -> None:
    with _map_cache_lock:
        _map_cache.clear()


def get_cached_map(algorithm, width, height, rooms, seed, options):
    build = lambda: generate_map(algorithm, width, height, rooms, options, seed=seed)  # noqa: E731
    cache_max = int(current_app.config.get("MAPS_CACHE_MAX", 8))
    if current_app.config.get("MAPS_DISABLE_CACHE") or cache_max <= 0:
        return build()
    key = (algorithm, width, height, rooms, seed, options)
    with _map_cache_lock:
        result = _map_cache.get(key)
        if result is not None:
            return result
    result = build()
    with _map_cache_lock:
        _map_cache[key] = result
        while len(_map_cache) > cache_max:
            _map_cache.pop(next(iter(_map_cache)), None)
    return result


def _generate_from_request():
    req = resolve_request(_params())
    result = get_cached_map(req["algorithm"], req["width"], req["height"], req["rooms"], req["seed"], req["options"])
    return req, result


@bp_maps.route("/api/maps/presets")
def list_presets():
    """Preset option bundles plus the default option values (camelCase keys)."""
    presets = {name: DungeonOptions().merged(values).as_camel_dict() for name, values in PRESETS.items()}
    return jsonify({"presets": presets, "defaults": DungeonOptions().as_camel_dict()})


@bp_maps.route("/api/maps/generate", methods=["GET", "POST"])
def generate_endpoint():
    """
    Generate a map.
    Params: algorithm, width, height, rooms, seed, preset and option keys.
    Response: result fields + { 'seed', 'algorithm', 'summary' }
    """
    req, result = _generate_from_request()
    payload = result.to_dict()
    payload["seed"] = req["seed"]
    payload["algorithm"] = req["algorithm"]
    payload["summary"] = summary_line(result)
    log.debug(event="map_served", algorithm=req["algorithm"], seed=req["seed"], width=result.width, height=result.height)
    return jsonify(payload)


@bp_maps.route("/api/maps/ascii")
def ascii_endpoint():
    _req, result = _generate_from_request()
    return Response(render_ascii(result) + "\n", mimetype="text/plain")


@bp_maps.route("/api/maps/metrics")
def metrics_endpoint():
    req, result = _generate_from_request()
    metrics = result.to_dict().get("metrics", {})
    return jsonify({"seed": req["seed"], "algorithm": req["algorithm"], "metrics": metrics})
