from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .errors import InvalidStepValue


MEASURE_COUNT = 4
STEPS_PER_MEASURE = 4
PATTERN_SIZE = MEASURE_COUNT * STEPS_PER_MEASURE
STEP_OFF = 0
STEP_ON = 1


@dataclass(frozen=True)
class Pattern:
    """Four measures of four steps each, in encounter order."""

    measures: Tuple[Tuple[int, ...], ...]

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Pattern":
        if len(raw) != PATTERN_SIZE:
            raise ValueError(
                f"pattern must be {PATTERN_SIZE} bytes, got {len(raw)}"
            )
        for idx, value in enumerate(raw):
            if value not in (STEP_OFF, STEP_ON):
                raise InvalidStepValue(
                    f"step {idx + 1} has value 0x{value:02X}; expected 0x00 or 0x01"
                )
        measures = tuple(
            tuple(raw[start : start + STEPS_PER_MEASURE])
            for start in range(0, PATTERN_SIZE, STEPS_PER_MEASURE)
        )
        return cls(measures=measures)

    @property
    def steps(self) -> Tuple[int, ...]:
        return tuple(value for measure in self.measures for value in measure)

    def active_steps(self) -> List[int]:
        """Return the 1-based indices of steps that trigger."""

        return [idx + 1 for idx, value in enumerate(self.steps) if value == STEP_ON]


@dataclass(frozen=True)
class Instrument:
    id: int  # 0-255, not unique
    name: str
    pattern: Pattern

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "measures": [list(measure) for measure in self.pattern.measures],
            "active_steps": self.pattern.active_steps(),
        }


@dataclass(frozen=True)
class SpliceFile:
    hardware_string: str
    tempo: float
    instruments: Tuple[Instrument, ...]  # encounter order, never sorted

    @classmethod
    def from_bytes(cls, data: bytes) -> "SpliceFile":
        from .decoder import decode

        return decode(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hardware_string": self.hardware_string,
            "tempo": self.tempo,
            "instruments": [inst.to_dict() for inst in self.instruments],
        }
