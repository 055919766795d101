from __future__ import annotations
import asyncio
import logging
from typing import Tuple
from PIL import Image, ImageDraw

from .geometry import Corners, Region
from .telemetry import AimRecorder
from .utils import clamp

SWITCH_COLOR = (60, 205, 60)
WAIT_COLOR = (255, 140, 40)
SAMPLE_COLOR = (64, 200, 255)
REGION_COLOR = (200, 200, 200)
CORNER_COLOR = (255, 60, 60)


def _canvas_bounds(recorder: AimRecorder, region: Region, corners: Corners) -> Tuple[float, float, float, float]:
    """Return (min_x, min_y, max_x, max_y) covering the region, corners and every event."""
    xs = [region.left, region.right, corners.decreasing.x, corners.increasing.x]
    ys = [region.top, region.bottom, corners.decreasing.y, corners.increasing.y]
    xs.extend(e.x for e in recorder.events)
    ys.extend(e.y for e in recorder.events)
    return min(xs), min(ys), max(xs), max(ys)


def render_aim_diagram(
    recorder: AimRecorder,
    region: Region,
    corners: Corners,
    *,
    background_color: Tuple[int, int, int] = (12, 12, 14),
    canvas_margin: int = 20,
    max_canvas_px: int = 2000,
    annotate: bool = True,
) -> Image.Image:
    """Draw the menu region, the two aim corners, the pointer path and each verdict.

    Sessions wider or taller than ``max_canvas_px`` are scaled down uniformly.
    """
    min_x, min_y, max_x, max_y = _canvas_bounds(recorder, region, corners)
    extent = max(max_x - min_x, max_y - min_y, 1.0)
    scale = min(1.0, max_canvas_px / extent)
    width = max(1, int((max_x - min_x) * scale))
    height = max(1, int((max_y - min_y) * scale))
    image = Image.new("RGB", (width + canvas_margin * 2, height + canvas_margin * 2 + 20), background_color)
    draw = ImageDraw.Draw(image)

    def to_canvas(x: float, y: float) -> Tuple[float, float]:
        return (
            canvas_margin + clamp((x - min_x) * scale, 0.0, float(width)),
            canvas_margin + clamp((y - min_y) * scale, 0.0, float(height)),
        )

    left, top = to_canvas(region.left, region.top)
    right, bottom = to_canvas(region.right, region.bottom)
    draw.rectangle([left, top, right, bottom], outline=REGION_COLOR, width=1)

    for corner in (corners.decreasing, corners.increasing):
        cx, cy = to_canvas(corner.x, corner.y)
        draw.ellipse([cx - 4, cy - 4, cx + 4, cy + 4], outline=CORNER_COLOR, width=2)

    samples = [to_canvas(e.x, e.y) for e in recorder.samples]
    if len(samples) > 1:
        draw.line(samples, fill=SAMPLE_COLOR, width=1)
    for x, y in samples:
        draw.ellipse([x - 1, y - 1, x + 1, y + 1], fill=SAMPLE_COLOR)

    decisions = recorder.decisions
    for event in decisions:
        x, y = to_canvas(event.x, event.y)
        color = SWITCH_COLOR if event.kind == "switch" else WAIT_COLOR
        draw.ellipse([x - 5, y - 5, x + 5, y + 5], outline=color, width=2)

    if annotate:
        waits = sum(1 for d in decisions if d.kind == "wait")
        draw.text(
            (canvas_margin, image.height - canvas_margin - 10),
            f"samples {len(samples)} | decisions {len(decisions)} | wait {waits}",
            fill=(200, 200, 200),
        )
    return image


async def save_aim_diagram_jpeg(
    recorder: AimRecorder,
    region: Region,
    corners: Corners,
    outfile: str = "menu_aim.jpg",
    **kwargs,
) -> str:
    """Render the aim diagram to a JPEG. Rendering runs in a worker thread."""
    events_snapshot = AimRecorder(events=list(recorder.events), start_ts=recorder.start_ts)

    def _render() -> str:
        image = render_aim_diagram(events_snapshot, region, corners, **kwargs)
        image.save(outfile, format="JPEG", quality=92, optimize=True)
        return outfile

    outfile_path = await asyncio.to_thread(_render)
    logging.getLogger(__name__).debug("Menu aim diagram saved to %s", outfile_path)
    return outfile_path
