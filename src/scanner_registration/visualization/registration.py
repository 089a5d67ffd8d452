"""
Registration Visualization Tools

Renders a registered scene (global beacons and scanner positions) with plotly.
"""

from typing import Optional

import numpy as np
import plotly.graph_objects as go

from ..alignment.engine import RegistrationResult


class RegistrationVisualizer:
    """Plots the unique global beacons and the scanners that observed them."""

    def __init__(self, beacon_marker_size: int = 3, scanner_marker_size: int = 8):
        self.beacon_marker_size = beacon_marker_size
        self.scanner_marker_size = scanner_marker_size

    # ----------------- Public API -----------------
    def build_figure(self, result: RegistrationResult, title: Optional[str] = None) -> go.Figure:
        beacons = result.unique_beacons()
        positions = np.array([list(s.position) for s in result.scanners], dtype=np.int64)
        labels = [f"scanner {s.id}" for s in result.scanners]

        fig = go.Figure()
        fig.add_trace(go.Scatter3d(
            x=beacons[:, 0], y=beacons[:, 1], z=beacons[:, 2],
            mode='markers',
            marker=dict(size=self.beacon_marker_size, color='steelblue'),
            name=f"beacons ({len(beacons)})",
        ))
        fig.add_trace(go.Scatter3d(
            x=positions[:, 0], y=positions[:, 1], z=positions[:, 2],
            mode='markers+text',
            marker=dict(size=self.scanner_marker_size, color='firebrick', symbol='diamond'),
            text=labels,
            name="scanners",
        ))

        # Edges from each scanner to the scanner it was matched against
        for s in result.scanners:
            parent = result.parents.get(s.id)
            if parent is None:
                continue
            p = result.by_id(parent).position
            fig.add_trace(go.Scatter3d(
                x=[p.x, s.position.x], y=[p.y, s.position.y], z=[p.z, s.position.z],
                mode='lines',
                line=dict(color='gray', width=2),
                showlegend=False,
                hoverinfo='skip',
            ))

        if title is None:
            title = (
                f"Registered scan: {len(result)} scanners, {len(beacons)} beacons, "
                f"max distance {result.max_scanner_distance()}"
            )
        fig.update_layout(
            title=title,
            scene=dict(aspectmode='data'),
            margin=dict(l=0, r=0, t=40, b=0),
        )
        return fig

    def visualize(self, result: RegistrationResult, title: Optional[str] = None) -> None:
        self.build_figure(result, title=title).show(renderer="browser")
