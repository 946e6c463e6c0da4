"""Ray caster for scenes of spheres and planes."""
from .config import RenderSettings, load_settings
from .errors import RaycastError
from .ppm import save_image, write_ppm
from .reader import load_scene, parse_scene, read_scene
from .render import render, render_scene
from .scene import Camera, Light, Plane, Scene, Sphere
from .shading import DiffuseShading, FlatShading, get_shading

__version__ = "0.1.0"
