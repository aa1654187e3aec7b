"""
Toggle nodes of the sample tree and export the last transition.

Writes the final SVG and an animated plotly figure of the last toggle.

Usage:
    python examples/toggle_to_html.py 2 6 --out results/
"""

import argparse
import asyncio
from pathlib import Path

from collapsibletree import TreeConfig, TreeView, transition_figure
from collapsibletree.sample_data import TREE_DATA


async def run(node_ids):
    view = TreeView.from_data(TREE_DATA, config=TreeConfig(realtime=False))
    await view.render()
    for node_id in node_ids:
        transition = await view.click(node_id)
        print(f"Toggled {view.model.get(node_id).name}: {transition.nodes.summary()}")
    return view


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("node_ids", type=int, nargs="*", default=[2])
    parser.add_argument("--out", type=Path, default=Path("results"))
    args = parser.parse_args()

    view = asyncio.run(run(args.node_ids))
    args.out.mkdir(parents=True, exist_ok=True)

    svg_file = args.out / "tree.svg"
    svg_file.write_text(view.scene.to_string(), encoding="utf-8")
    print(f"SVG written to {svg_file}")

    frames = view.controller.frames(view.last_transition)
    fig = transition_figure(frames, duration_ms=view.config.duration_ms)
    html_file = args.out / "transition.html"
    fig.write_html(html_file)
    print(f"Animated figure written to {html_file}")


if __name__ == "__main__":
    main()
