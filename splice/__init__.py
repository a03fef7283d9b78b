"""Decode and render SPLICE drum-machine pattern files."""

from .decoder import (  # noqa: F401
    HEADER_SIZE,
    HW_STRING_SIZE,
    MAGIC,
    decode,
    iter_instruments,
    read_header,
)
from .errors import (  # noqa: F401
    FormatError,
    InvalidMagic,
    InvalidStepValue,
    TruncatedInput,
    TruncatedInstrument,
)
from .model import (  # noqa: F401
    PATTERN_SIZE,
    Instrument,
    Pattern,
    SpliceFile,
)
from .render import (  # noqa: F401
    STEP_SYMBOLS,
    format_pattern,
    format_tempo,
    render,
    render_header,
    render_instrument,
)
