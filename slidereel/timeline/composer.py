"""
Timeline composer: slide data + duration -> self-contained animated document.

The document embeds its own schedule (``data-cue-delay`` attributes and a
JSON block) so it can be inspected without a browser. Identical inputs
always produce byte-identical output.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from slidereel.core.errors import InvalidSlideData
from slidereel.core.models import ComposedDocument, SlideSpec

from . import template
from .cues import DEFAULT_TIMING, TimelineTiming, bar_heights, build_timeline, chart_values

CANVAS_WIDTH = 1920
CANVAS_HEIGHT = 1080


def coerce_slide_spec(slide: SlideSpec | Mapping[str, Any] | None) -> SlideSpec:
    """Accept a ready ``SlideSpec`` or a raw mapping from the request body."""
    if isinstance(slide, SlideSpec):
        return slide
    if slide is None:
        return SlideSpec()
    if not isinstance(slide, Mapping):
        raise InvalidSlideData(f"Slide data must be an object, got {type(slide).__name__}")
    try:
        return SlideSpec.model_validate(dict(slide))
    except ValidationError as e:
        raise InvalidSlideData(f"Invalid slide data: {e.errors()[0]['msg']}") from e


def compose(
    spec: SlideSpec | Mapping[str, Any] | None,
    duration: float,
    timing: TimelineTiming = DEFAULT_TIMING,
) -> ComposedDocument:
    """Compose the animated document for one slide.

    Raises:
        InvalidSlideData: non-positive duration, non-finite chart values, or a
            cue scheduled after ``duration``.
    """
    spec = coerce_slide_spec(spec)
    timeline = build_timeline(spec, duration, timing)
    delays = {cue.target: cue.delay_seconds for cue in timeline}

    bullets = "\n".join(
        template.bullet_fragment(idx, text, delays[f"bullet-{idx}"])
        for idx, text in enumerate(spec.bullets)
    )

    chart = ""
    if spec.has_chart:
        pairs = chart_values(spec)
        heights = bar_heights([value for _, value in pairs])
        bars = [
            template.bar_fragment(idx, label, value, height, delays[f"bar-{idx}"])
            for idx, ((label, value), height) in enumerate(zip(pairs, heights))
        ]
        chart = template.chart_fragment(bars)

    schedule = json.dumps(
        {"duration": round(float(duration), 3), "cues": [c.as_dict() for c in timeline]},
        separators=(",", ":"),
    )
    document = template.DOCUMENT % {
        "width": CANVAS_WIDTH,
        "height": CANVAS_HEIGHT,
        "stylesheet": template.STYLESHEET % {"width": CANVAS_WIDTH, "height": CANVAS_HEIGHT},
        "schedule": schedule,
        "duration": template.format_seconds(float(duration)),
        "title": template.title_fragment(spec.text, delays["title"]),
        "bullets": bullets,
        "chart": chart,
    }

    logger.debug(
        f"Composed slide '{spec.text}' with {len(timeline)} cues "
        f"(chart={'yes' if chart else 'no'}, duration={float(duration):g}s)"
    )
    return ComposedDocument(html=document, timeline=timeline, duration=float(duration))


__all__ = ["compose", "coerce_slide_spec", "CANVAS_WIDTH", "CANVAS_HEIGHT"]
