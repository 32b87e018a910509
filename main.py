from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Sequence

from chartkit.adapters import load_charts
from chartkit.config import LayoutConfig, load_layout_config
from chartkit.errors import ChartDataError
from chartkit.interpolation import inspect
from chartkit.presentation import PresentationState
from chartkit.scales import format_ticks_for_axis
from chartkit.viewport import Viewport, ViewportController, axis_for, line_axis_for, line_transform, x_axis_labels

LOGGER = logging.getLogger("chartkit")


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="chartkit")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [layout] table.")
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="Print bounds, axis ticks and x labels for every chart.")
    _add_chart_args(summary)
    summary.add_argument("--window", type=int, nargs=2, metavar=("MIN", "MAX"), default=None)

    insp = sub.add_parser("inspect", help="Print crosshair values at a fractional index.")
    _add_chart_args(insp)
    insp.add_argument("--chart", type=int, default=0)
    insp.add_argument("--x", type=float, required=True)

    paths = sub.add_parser("paths", help="Print SVG path data for every line of one chart.")
    _add_chart_args(paths)
    paths.add_argument("--chart", type=int, default=0)
    paths.add_argument("--window", type=int, nargs=2, metavar=("MIN", "MAX"), default=None)
    paths.add_argument("--width", type=int, default=None)
    paths.add_argument("--height", type=int, default=None)
    paths.add_argument("--preview", action="store_true", help="Emit the down-sampled preview paths.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        config = load_layout_config(args.config) if args.config is not None else LayoutConfig()
        states = _load_states(args.charts, args.hide, config)
        if args.command == "summary":
            out: Any = [_summarize(state, config, args.window) for state in states]
        elif args.command == "inspect":
            out = _inspect(_pick(states, args.chart), args.x)
        elif args.command == "paths":
            out = _paths(_pick(states, args.chart), config, args.window, args.width, args.height, args.preview)
        else:
            raise RuntimeError(f"unsupported command: {args.command}")
    except (ChartDataError, IndexError, ValueError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 2

    print(json.dumps(out, indent=2))
    return 0


def _add_chart_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("charts", type=Path, help="JSON file with one chart object or a list of them.")
    p.add_argument(
        "--hide",
        type=int,
        action="append",
        default=[],
        metavar="LINE",
        help="Hide a line by index (repeatable). The last visible line is never hidden.",
    )


def _load_states(path: Path, hide: Sequence[int], config: LayoutConfig) -> list[PresentationState]:
    states = []
    for chart in load_charts(path, date_format=config.date_format):
        state = PresentationState(chart, preview_stride=config.preview_stride)
        for index in hide:
            if index < state.lines_count and not state.set_line_visible(False, index):
                LOGGER.info("line %d kept visible: it is the last visible line", index)
        states.append(state)
    return states


def _pick(states: Sequence[PresentationState], index: int) -> PresentationState:
    if not 0 <= index < len(states):
        raise IndexError(f"chart {index} out of range [0, {len(states)})")
    return states[index]


def _controller(state: PresentationState, config: LayoutConfig, window: Sequence[int] | None) -> ViewportController:
    controller = ViewportController(
        state.points_count,
        initial_fraction=config.initial_fraction,
        min_fraction=config.min_fraction,
    )
    if window is not None:
        controller.set_range(window[0], window[1])
    return controller


def _summarize(state: PresentationState, config: LayoutConfig, window: Sequence[int] | None) -> dict[str, Any]:
    viewport = _controller(state, config, window).viewport
    if state.type == "y_scaled":
        axes = [line_axis_for(state, i, viewport, tick_count=config.tick_count) for i in state.visible_indices()]
    else:
        axes = [axis_for(state, viewport, tick_count=config.tick_count, padding_ratio=config.padding_ratio)]
    return {
        "type": state.type,
        "lines": [
            {"name": state.line_at(i).name, "kind": state.line_at(i).kind, "visible": state.is_line_visible_at(i)}
            for i in range(state.lines_count)
        ],
        "lower": state.lower,
        "upper": state.upper,
        "window": [viewport.min_index, viewport.max_index],
        "axes": [
            {"lower": a.lower, "upper": a.upper, "step": a.step, "ticks": format_ticks_for_axis(a.ticks)} for a in axes
        ],
        "x_labels": x_axis_labels(state.labels, viewport, config.x_label_count),
    }


def _inspect(state: PresentationState, x: float) -> dict[str, Any]:
    info = inspect(state, x)
    return {
        "x": info.x,
        "index": info.index,
        "label": info.label,
        "points": [{"name": p.name, "value": p.value, "y": p.y} for p in info.points],
    }


def _paths(
    state: PresentationState,
    config: LayoutConfig,
    window: Sequence[int] | None,
    width: int | None,
    height: int | None,
    preview: bool,
) -> list[dict[str, Any]]:
    if (width is None) != (height is None):
        raise ValueError("--width and --height must be given together")
    controller = _controller(state, config, window)
    # The preview strip always shows the whole series.
    viewport = Viewport(0, controller.last_index) if preview else controller.viewport
    out = []
    for i in range(state.lines_count):
        line = state.line_at(i)
        path = line.preview_path if preview else line.path
        if width is not None and height is not None:
            if state.type == "y_scaled":
                axis = line_axis_for(state, i, viewport, tick_count=config.tick_count)
            else:
                axis = axis_for(state, viewport, tick_count=config.tick_count, padding_ratio=config.padding_ratio)
            path = path.transformed(line_transform(state, i, viewport, axis, width, height), height=height)
        out.append({"name": line.name, "visible": line.is_visible, "d": path.to_svg_path()})
    return out


if __name__ == "__main__":
    raise SystemExit(main())
