"""
Scene inspection: a text listing and an interactive 3D preview using Plotly.
Helps verify geometry before rendering.
"""
import math

import plotly.graph_objects as go

from .scene import Plane, Scene, Sphere
from .vector import add, mul, norm


def describe_scene(scene: Scene) -> str:
    """Plain-text listing of everything in the scene."""
    cam = scene.camera
    lines = ["Camera:", f"\tWidth: {cam.width:f}", f"\tHeight: {cam.height:f}"]

    for surface in scene.surfaces:
        lines.append(f"{surface.kind.capitalize()}:")
        lines.extend(_vector_lines("Color", "rgb", surface.color))
        lines.extend(_vector_lines("Position", "xyz", surface.position))
        if isinstance(surface, Plane):
            lines.extend(_vector_lines("Normal", "xyz", surface.normal))
        elif isinstance(surface, Sphere):
            lines.append(f"\tRadius: {surface.radius:f}")

    for light in scene.lights:
        lines.append("Light:")
        lines.extend(_vector_lines("Color", "rgb", light.color))
        lines.extend(_vector_lines("Position", "xyz", light.position))
        if light.direction is not None:
            lines.extend(_vector_lines("Direction", "xyz", light.direction))
        lines.append(f"\tRadial: {light.radial_a0:f} {light.radial_a1:f} {light.radial_a2:f}")
        lines.append(f"\tAngular: {light.angular_a0:f}")

    return "\n".join(lines)


def _vector_lines(label, names, v):
    return [f"\t{label}.{n}: {c:f}" for n, c in zip(names, v)]


def _rgb(color) -> str:
    r, g, b = (int(max(0.0, min(1.0, c)) * 255) for c in color)
    return f"rgb({r}, {g}, {b})"


def _plane_patch(plane: Plane, size: float):
    """Corners of a square of side ``size`` in the plane, centred on its position."""
    n = plane.normal
    # any vector not parallel to n
    helper = (1.0, 0.0, 0.0) if abs(n[0]) < 0.9 else (0.0, 1.0, 0.0)
    u = norm((n[1] * helper[2] - n[2] * helper[1],
              n[2] * helper[0] - n[0] * helper[2],
              n[0] * helper[1] - n[1] * helper[0]))
    v = (n[1] * u[2] - n[2] * u[1],
         n[2] * u[0] - n[0] * u[2],
         n[0] * u[1] - n[1] * u[0])
    half = size / 2
    return [add(plane.position, add(mul(u, su * half), mul(v, sv * half)))
            for su, sv in ((-1, -1), (1, -1), (1, 1), (-1, 1))]


def create_scene_preview(scene: Scene, plane_size: float = 10.0, steps: int = 16) -> go.Figure:
    """Create interactive 3D plot of scene."""
    fig = go.Figure()

    # Camera at the origin looking down +z, with its view plane at z = 1
    cam = scene.camera
    hw, hh = cam.width / 2, cam.height / 2
    corners = [(-hw, -hh, 1.0), (hw, -hh, 1.0), (hw, hh, 1.0), (-hw, hh, 1.0)]
    fig.add_trace(go.Scatter3d(
        x=[0.0], y=[0.0], z=[0.0],
        mode='markers',
        marker=dict(size=6, color='red', symbol='diamond'),
        name='Camera'
    ))
    for i, corner in enumerate(corners):
        nxt = corners[(i + 1) % 4]
        fig.add_trace(go.Scatter3d(
            x=[0.0, corner[0], nxt[0]],
            y=[0.0, corner[1], nxt[1]],
            z=[0.0, corner[2], nxt[2]],
            mode='lines',
            line=dict(color='red', width=2, dash='dash'),
            showlegend=False
        ))

    for i, surface in enumerate(scene.surfaces):
        if isinstance(surface, Sphere):
            cx, cy, cz = surface.position
            r = surface.radius
            us = [2 * math.pi * k / steps for k in range(steps + 1)]
            vs = [math.pi * k / steps for k in range(steps + 1)]
            fig.add_trace(go.Surface(
                x=[[cx + r * math.cos(u) * math.sin(v) for u in us] for v in vs],
                y=[[cy + r * math.sin(u) * math.sin(v) for u in us] for v in vs],
                z=[[cz + r * math.cos(v) for u in us] for v in vs],
                colorscale=[[0, _rgb(surface.color)], [1, _rgb(surface.color)]],
                showscale=False,
                name=f'Sphere {i+1}'
            ))
        elif isinstance(surface, Plane):
            pts = _plane_patch(surface, plane_size)
            fig.add_trace(go.Mesh3d(
                x=[p[0] for p in pts],
                y=[p[1] for p in pts],
                z=[p[2] for p in pts],
                i=[0, 0], j=[1, 2], k=[2, 3],
                color=_rgb(surface.color),
                opacity=0.5,
                name=f'Plane {i+1}'
            ))

    for i, light in enumerate(scene.lights):
        fig.add_trace(go.Scatter3d(
            x=[light.position[0]],
            y=[light.position[1]],
            z=[light.position[2]],
            mode='markers',
            marker=dict(size=10, color='yellow', symbol='circle'),
            name=f'Light {i+1}'
        ))

    fig.update_layout(
        title="Scene Preview (Interactive 3D)",
        scene=dict(
            xaxis_title="X",
            yaxis_title="Y",
            zaxis_title="Z",
            aspectmode='data'
        ),
        width=1000,
        height=800
    )

    return fig
