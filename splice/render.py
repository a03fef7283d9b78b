"""Render a decoded :class:`SpliceFile` as the plain-text pattern report.

Example::

    Saved with HW Version: 0.808-alpha
    Tempo: 120
    (0) kick	|x---|x---|x---|x---|
"""

from __future__ import annotations

import math

from .model import Instrument, Pattern, SpliceFile

STEP_SYMBOLS = {0: "-", 1: "x"}
TEMPO_EPSILON = 0.0001


def format_tempo(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    whole = math.trunc(value)
    if abs(value - whole) < TEMPO_EPSILON:
        return str(whole)
    return f"{value:.1f}"


def format_pattern(pattern: Pattern) -> str:
    cells = ["".join(STEP_SYMBOLS[step] for step in measure) for measure in pattern.measures]
    return "|" + "|".join(cells) + "|"


def render_header(splice_file: SpliceFile) -> str:
    return (
        f"Saved with HW Version: {splice_file.hardware_string}\n"
        f"Tempo: {format_tempo(splice_file.tempo)}\n"
    )


def render_instrument(instrument: Instrument) -> str:
    return f"({instrument.id}) {instrument.name}\t{format_pattern(instrument.pattern)}\n"


def render(splice_file: SpliceFile) -> str:
    parts = [render_header(splice_file)]
    parts.extend(render_instrument(inst) for inst in splice_file.instruments)
    return "".join(parts)
