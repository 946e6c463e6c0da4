"""Render settings and loading them from a JSON settings file."""
import json
from typing import Any, Dict, Optional

from .errors import ConfigError

COLOR_POLICIES = ("strict", "clamp")
SHADING_MODELS = ("flat", "diffuse")


class RenderSettings:
    """
    Knobs that change how a scene is read and rendered.

    color_policy: "strict" rejects colour channels outside [0, 1] while
        reading; "clamp" accepts them and clamps when writing pixels.
    shading: "flat" paints the nearest surface colour; "diffuse" adds up
        shadowed diffuse light from every scene light.
    max_objects, max_lights: capacity of the scene lists.
    workers: render processes; 1 renders in the calling process.
    """

    def __init__(self, color_policy: str = "strict", shading: str = "flat",
                 max_objects: int = 128, max_lights: int = 128,
                 workers: int = 1, verbose: bool = False):
        self.color_policy = color_policy
        self.shading = shading
        self.max_objects = max_objects
        self.max_lights = max_lights
        self.workers = workers
        self.verbose = verbose

    def to_dict(self) -> Dict[str, Any]:
        return dict(vars(self))

    def __repr__(self) -> str:
        return f"RenderSettings({self.to_dict()!r})"


def validate_settings(settings: RenderSettings) -> None:
    if settings.color_policy not in COLOR_POLICIES:
        raise ConfigError(f'Unknown color policy "{settings.color_policy}"')
    if settings.shading not in SHADING_MODELS:
        raise ConfigError(f'Unknown shading model "{settings.shading}"')
    for name in ("max_objects", "max_lights", "workers"):
        value = getattr(settings, name)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            raise ConfigError(f"{name} must be a positive integer")


def load_settings(json_path: str, overrides: Optional[Dict[str, Any]] = None) -> RenderSettings:
    """
    Load render settings from the "render" section of a JSON file.

    Keys given in ``overrides`` (skipping None values) win over the file.
    """
    try:
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f'Could not open settings file "{json_path}"') from e
    except json.JSONDecodeError as e:
        raise ConfigError(f'Settings file "{json_path}" is not valid JSON: {e.msg}', e.lineno) from e
    except UnicodeDecodeError as e:
        raise ConfigError(f'Settings file "{json_path}" is not valid UTF-8') from e

    if not isinstance(data, dict) or not isinstance(data.get("render", {}), dict):
        raise ConfigError(f'Settings file "{json_path}" must hold a "render" object')

    return make_settings(data.get("render", {}), overrides)


def make_settings(values: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> RenderSettings:
    known = RenderSettings().to_dict()
    merged = dict(values)
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})

    unknown = sorted(set(merged) - set(known))
    if unknown:
        raise ConfigError(f"Unknown render setting(s): {', '.join(unknown)}")

    settings = RenderSettings(**merged)
    validate_settings(settings)
    return settings
