"""Output reporting helpers."""
from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, TextIO

from .models import Stop, TourVariation
from .reconcile import StepArrival


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _fsync_dir(path: str) -> None:
    try:
        dir_fd = os.open(path, os.O_DIRECTORY)
    except (AttributeError, OSError):
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        pass
    finally:
        os.close(dir_fd)


@contextmanager
def atomic_writer(
    path: str,
    mode: str = "w",
    encoding: str = "utf-8",
    newline: Optional[str] = None,
) -> Iterator[TextIO]:
    dir_path = os.path.dirname(path) or "."
    base = os.path.basename(path)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    try:
        with os.fdopen(fd, mode, encoding=encoding, newline=newline) as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        _fsync_dir(dir_path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def atomic_write_text(path: str, text: str) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        f.write(text)


def write_json_object(path: str, payload: Dict[str, Any]) -> None:
    with atomic_writer(path, mode="w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def write_variations_json(path: str, variations: Sequence[TourVariation], duration: int) -> None:
    write_json_object(
        path,
        {
            "duration": duration,
            "tourVariations": [variation.to_dict() for variation in variations],
        },
    )


def render_variations(variations: Sequence[TourVariation], duration: int) -> str:
    lines = [f"Tour length: {duration} minutes"]
    for index, variation in enumerate(variations):
        lines.append("")
        lines.append(f"[{index}] {variation.name} - {variation.description}")
        if variation.unresolved:
            lines.append(f"    unavailable: {variation.error}")
        elif variation.estimated_time_min is not None:
            lines.append(
                f"    walking: {variation.estimated_time_min} min, distance: {variation.distance_text}"
            )
        if not variation.stops:
            lines.append("    no artworks fit this tour")
        for position, stop in enumerate(variation.stops, start=1):
            lines.append(f"    {position}. {stop.title} by {stop.artist}")
    return "\n".join(lines)


def render_arrivals(arrivals: Sequence[StepArrival], stops: Sequence[Stop]) -> List[str]:
    lines = []
    for arrival in arrivals:
        if arrival.stop_index is None:
            continue
        stop = stops[arrival.stop_index]
        lines.append(
            f"leg {arrival.leg_index + 1}, step {arrival.step_index + 1}: "
            f"arrive at {stop.title} ({arrival.distance_m:.0f} m)"
        )
    return lines
