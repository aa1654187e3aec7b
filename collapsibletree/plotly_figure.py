"""
Export a sampled transition as an animated plotly figure.

Useful in notebooks to review a toggle without the web front end. Every
animation frame becomes one plotly frame; links are drawn as sampled cubic
Bezier curves matching the SVG paths.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import plotly.graph_objects as go

from collapsibletree.animation import Frame, LinkState
from collapsibletree.svg import COLLAPSED_FILL, LEAF_FILL, LINK_STROKE_COLOR

BEZIER_SAMPLES = 16


def bezier_points(source, target, samples: int = BEZIER_SAMPLES, vertical: bool = True):
    """Sample the link curve between two points. Returns (xs, ys) arrays."""
    (sx, sy), (tx, ty) = source, target
    t = np.linspace(0.0, 1.0, samples)[:, None]
    if vertical:
        my = (sy + ty) / 2
        control = np.array([[sx, sy], [sx, my], [tx, my], [tx, ty]], dtype=float)
    else:
        mx = (sx + tx) / 2
        control = np.array([[sx, sy], [mx, sy], [mx, ty], [tx, ty]], dtype=float)
    weights = np.hstack(
        [(1 - t) ** 3, 3 * (1 - t) ** 2 * t, 3 * (1 - t) * t**2, t**3]
    )
    points = weights @ control
    return points[:, 0], points[:, 1]


def _link_trace(links: Sequence[LinkState], vertical: bool) -> go.Scatter:
    xs: List[Optional[float]] = []
    ys: List[Optional[float]] = []
    for link in links:
        if link.opacity <= 0:
            continue
        bx, by = bezier_points(link.source, link.target, vertical=vertical)
        xs.extend(bx.tolist() + [None])
        ys.extend(by.tolist() + [None])
    return go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        line=dict(color=LINK_STROKE_COLOR, width=1.5),
        opacity=0.4,
        hoverinfo="skip",
        showlegend=False,
    )


def _node_trace(frame: Frame) -> go.Scatter:
    return go.Scatter(
        x=[n.x for n in frame.nodes],
        y=[n.y for n in frame.nodes],
        mode="markers+text",
        text=[n.name for n in frame.nodes],
        textposition=[
            "bottom center" if n.depth else "top center" for n in frame.nodes
        ],
        customdata=[n.id for n in frame.nodes],
        marker=dict(
            size=8,
            color=[
                COLLAPSED_FILL if n.has_hidden_children else LEAF_FILL
                for n in frame.nodes
            ],
            opacity=[n.opacity for n in frame.nodes],
        ),
        hovertemplate="%{text} (id %{customdata})<extra></extra>",
        showlegend=False,
    )


def transition_figure(
    frames: Sequence[Frame],
    duration_ms: float = 250,
    vertical: bool = True,
    title: Optional[str] = None,
) -> go.Figure:
    """
    Build an animated figure from the frames of one transition.

    Args:
        frames: Frames as produced by ``AnimationController.frames``.
        duration_ms: Total playback time of the animation.
        vertical: Depth grows downward; the y axis is reversed.
        title: Optional figure title.

    Returns:
        A plotly Figure showing the first frame with a play button.
    """
    if not frames:
        raise ValueError("Cannot build a figure from an empty frame sequence")
    frame_ms = duration_ms / max(1, len(frames) - 1)

    plotly_frames = [
        go.Frame(
            data=[_link_trace(f.links, vertical), _node_trace(f)],
            name=str(f.index),
        )
        for f in frames
    ]
    fig = go.Figure(data=plotly_frames[0].data, frames=plotly_frames)
    fig.update_layout(
        title=title,
        template="plotly_white",
        xaxis=dict(visible=False),
        yaxis=dict(visible=False, autorange="reversed" if vertical else True),
        updatemenus=[
            dict(
                type="buttons",
                showactive=False,
                buttons=[
                    dict(
                        label="Play",
                        method="animate",
                        args=[
                            None,
                            dict(
                                frame=dict(duration=frame_ms, redraw=True),
                                transition=dict(duration=0),
                                fromcurrent=False,
                            ),
                        ],
                    )
                ],
            )
        ],
    )
    return fig
