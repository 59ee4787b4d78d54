# canvas_scripts/render_scenes.py
"""
render_scenes.py — Batch renderer for Scene JSON files.

What it does:
- Loads every *.json scene in the input folder
- Renders it with figure_renderer.render() under the requested view
- Saves a PNG per file (and an SVG with --svg) into the output folder
- Prints a pass/fail summary (and exits non-zero if any fail)

Run:
  python -m geometry_canvas.canvas_scripts.render_scenes

Optional:
  python -m geometry_canvas.canvas_scripts.render_scenes --in sample_scenes --out render_out --grid --rotate 30
"""

from __future__ import annotations

import argparse
import os
import traceback
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

# Force headless backend before importing pyplot anywhere
os.environ.setdefault("MPLBACKEND", "Agg")

import matplotlib  # noqa: E402

matplotlib.use("Agg")

from geometry_canvas.config import settings  # noqa: E402
from geometry_canvas.canvas_scripts.utils import safe_slug, setup_logger  # noqa: E402

logger = setup_logger(__name__)


def _build_view(args: argparse.Namespace):
    from .figure_renderer.view import ViewState

    return ViewState(
        zoom=1.0,
        flip_x=bool(args.flip_x),
        flip_y=bool(args.flip_y),
        show_grid=bool(args.grid),
    ).with_zoom(args.zoom).rotated_by(args.rotate)


def _render_one(in_path: Path, out_dir: Path, view, dpi: int, write_svg: bool) -> Tuple[bool, str]:
    """
    Returns (ok, message). Producer errors and render errors both count as FAIL.
    """
    try:
        # Import here so MPLBACKEND is set first.
        from .figure_renderer.geometry_renderer import render
        from .figure_renderer.ingest import load_scene_file
        from .figure_renderer.plotter import save_png
        from .figure_renderer.svg_export import drawlist_to_svg
        from .figure_renderer.utils import validate_scene

        scene = load_scene_file(in_path)
        for issue in validate_scene(scene):
            logger.warning(f"{in_path.name}: {issue}")

        drawlist = render(scene, view)
        stem = safe_slug(in_path.stem)
        png_path = out_dir / f"{stem}.png"
        save_png(drawlist, png_path, dpi=dpi)
        written = [png_path.name]

        if write_svg:
            svg_path = out_dir / f"{stem}.svg"
            drawlist_to_svg(drawlist, svg_path)
            written.append(svg_path.name)

        return True, f"OK  -> {', '.join(written)}"

    except Exception as e:
        tb = traceback.format_exc()
        return False, f"FAIL -> {in_path.name}: {e}\n{tb}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render Scene JSON files to PNG (and SVG).")
    parser.add_argument(
        "--in",
        dest="in_dir",
        default=str(Path(__file__).parent / "sample_scenes"),
        help="Folder containing *.json scenes (default: sample_scenes next to this file).",
    )
    parser.add_argument(
        "--out",
        dest="out_dir",
        default=str(Path(__file__).parent / "render_out"),
        help="Output folder (default: render_out next to this file).",
    )
    parser.add_argument("--svg", action="store_true", default=settings.WRITE_SVG, help="Also write an SVG per scene.")
    parser.add_argument("--grid", action="store_true", help="Square grid mode.")
    parser.add_argument("--zoom", type=float, default=1.0, help="Zoom factor (clamped to the zoom limits).")
    parser.add_argument("--rotate", type=float, default=0.0, help="Rotation in degrees.")
    parser.add_argument("--flip-x", dest="flip_x", action="store_true", help="Mirror horizontally.")
    parser.add_argument("--flip-y", dest="flip_y", action="store_true", help="Mirror vertically.")
    parser.add_argument("--dpi", dest="dpi", type=int, default=settings.RENDER_DPI, help="PNG dpi.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    in_dir = Path(args.in_dir).expanduser().resolve()
    out_dir = Path(args.out_dir).expanduser().resolve()

    if not in_dir.exists() or not in_dir.is_dir():
        print(f"Input folder not found: {in_dir}")
        return 2

    out_dir.mkdir(parents=True, exist_ok=True)

    json_files = sorted(in_dir.glob("*.json"))
    if not json_files:
        print(f"No *.json files found in: {in_dir}")
        return 0

    view = _build_view(args)

    print(f"Rendering {len(json_files)} scene(s)")
    print(f"  in : {in_dir}")
    print(f"  out: {out_dir}")
    print("")

    ok_count = 0
    failed: List[str] = []

    for p in json_files:
        ok, msg = _render_one(p, out_dir, view, int(args.dpi), bool(args.svg))
        print(msg)
        if ok:
            ok_count += 1
        else:
            failed.append(p.name)

    print("")
    print("Summary")
    print("-------")
    print(f"Passed: {ok_count}")
    print(f"Failed: {len(failed)}")
    if failed:
        print("Failed files:")
        for f in failed:
            print(f"  - {f}")

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
