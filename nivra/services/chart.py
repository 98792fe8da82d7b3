"""
Chart projector: shapes the store's label/value series for the trend chart.

The browser-side chart library does the drawing. This module only builds
the data it is fed and keeps one rendering up to date:

project(labels, values, window)   -> ChartSeries        (pure)
build_chart_config(series)        -> dict               (pure)
ChartProjector.refresh(store)     -> rendering          (create or update)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

from nivra.services.entry_store import EntryStore, trim_to_max
from nivra.services.vocabulary import display_name, glyph_of

logger = logging.getLogger(__name__)

DEFAULT_CHART_WINDOW = 120

_LINE_COLOR = "#194569"
_FILL_COLOR = "rgba(25,69,105,0.08)"
_POINT_COLOR = "#5F84A2"
_GRID_COLOR = "rgba(25,69,105,0.06)"


@dataclass(frozen=True)
class ChartSeries:
    labels: tuple[str, ...]
    values: tuple[int, ...]


def project(labels: Sequence[str], values: Sequence[int], window: int = DEFAULT_CHART_WINDOW) -> ChartSeries:
    """Trim both sequences to the last `window` points."""
    if len(labels) != len(values):
        raise ValueError("labels and values must have the same length")
    return ChartSeries(
        labels=tuple(trim_to_max(list(labels), window)),
        values=tuple(trim_to_max(list(values), window)),
    )


def build_chart_config(series: ChartSeries) -> dict[str, Any]:
    """Line-chart document: one "Mood" dataset on a 0..5 axis with glyph ticks."""
    return {
        "type": "line",
        "data": {
            "labels": list(series.labels),
            "datasets": [
                {
                    "label": "Mood",
                    "data": list(series.values),
                    "borderColor": _LINE_COLOR,
                    "backgroundColor": _FILL_COLOR,
                    "pointBackgroundColor": _POINT_COLOR,
                    "pointBorderColor": _LINE_COLOR,
                    "tension": 0.36,
                    "fill": True,
                    "borderWidth": 2,
                }
            ],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "scales": {
                "x": {"grid": {"color": _GRID_COLOR}},
                "y": {"min": 0, "max": 5, "ticks": {"stepSize": 1}, "grid": {"color": _GRID_COLOR}},
            },
            # Lookup tables for the tick and tooltip callbacks on the client.
            "tickGlyphs": {str(v): glyph_of(v) for v in range(0, 6)},
            "tooltipLabels": {
                str(v): f"{glyph_of(v)}  {display_name(v)}" for v in range(1, 6)
            },
        },
    }


@dataclass
class ChartRendering:
    series: ChartSeries
    config: dict[str, Any]
    revision: int = 1


class ChartRenderer(Protocol):
    def create(self, series: ChartSeries) -> Any: ...

    def update(self, rendering: Any, series: ChartSeries) -> Any: ...


class ChartConfigRenderer:
    """Keeps the chart document in memory for the UI to fetch."""

    def create(self, series: ChartSeries) -> ChartRendering:
        return ChartRendering(series=series, config=build_chart_config(series))

    def update(self, rendering: ChartRendering, series: ChartSeries) -> ChartRendering:
        if rendering.series == series:
            return rendering
        rendering.series = series
        dataset = rendering.config["data"]
        dataset["labels"] = list(series.labels)
        dataset["datasets"][0]["data"] = list(series.values)
        rendering.revision += 1
        return rendering


@dataclass
class ChartProjector:
    renderer: ChartRenderer = field(default_factory=ChartConfigRenderer)
    window: int = DEFAULT_CHART_WINDOW
    rendering: Optional[Any] = None

    def refresh(self, store: EntryStore) -> Any:
        """Re-apply the store's series; constructs the rendering on first use."""
        series = project(store.labels, store.moods, self.window)
        if self.rendering is None:
            self.rendering = self.renderer.create(series)
            logger.debug("Chart created with %d points", len(series.values))
        else:
            self.rendering = self.renderer.update(self.rendering, series)
        return self.rendering
