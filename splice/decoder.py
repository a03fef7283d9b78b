"""Decode SPLICE drum-machine pattern files.

File layout (multi-byte integers big-endian unless noted):

  0x00  6   magic ``SPLICE``
  0x06  8   payload length (u64 BE)
  0x0E  N   payload
  ...       trailer, ignored

Payload:

  0x00  32  hardware string, NUL padded
  0x20  4   tempo, IEEE-754 float32 LITTLE-endian
  0x24  ..  instrument records until the payload is exhausted

Instrument record: id (u8), name length (u32 BE), name, 16 step bytes.
"""

from __future__ import annotations

import logging
import struct
from typing import Iterator, Tuple

from .errors import InvalidMagic, TruncatedInput, TruncatedInstrument
from .model import PATTERN_SIZE, Instrument, Pattern, SpliceFile

logger = logging.getLogger(__name__)

MAGIC = b"SPLICE"
LENGTH_FIELD_SIZE = 8
HEADER_SIZE = len(MAGIC) + LENGTH_FIELD_SIZE  # 14
HW_STRING_SIZE = 32
TEMPO_SIZE = 4
PAYLOAD_PREAMBLE_SIZE = HW_STRING_SIZE + TEMPO_SIZE  # 36
RECORD_FIXED_SIZE = 1 + 4 + PATTERN_SIZE  # id + name length + pattern


def read_header(data: bytes) -> Tuple[int, bytes]:
    """Validate magic + length prefix and return ``(length, payload)``.

    Bytes after the declared payload are dropped without inspection.
    """
    if data[: len(MAGIC)] != MAGIC:
        raise InvalidMagic(f"bad magic: {bytes(data[: len(MAGIC)]).hex()}")
    if len(data) < HEADER_SIZE:
        raise TruncatedInput(
            f"file too short for header ({len(data)} bytes, need {HEADER_SIZE})"
        )

    (length,) = struct.unpack_from(">Q", data, len(MAGIC))
    available = len(data) - HEADER_SIZE
    if length > available:
        raise TruncatedInput(
            f"payload length {length} exceeds {available} available bytes"
        )

    payload = bytes(data[HEADER_SIZE : HEADER_SIZE + length])
    logger.debug("payload length %d, trailer %d bytes", length, available - length)
    return length, payload


def trim_hardware_string(raw: bytes) -> str:
    return raw.rstrip(b"\x00").decode("utf-8", errors="replace")


def iter_instruments(stream: bytes, base_offset: int = 0) -> Iterator[Instrument]:
    """Yield instrument records from ``stream`` in encounter order.

    ``base_offset`` is added to offsets reported in errors so they point
    into the enclosing payload.
    """
    pos = 0
    end = len(stream)
    while pos < end:
        record_start = pos
        if end - pos < 1 + 4:
            raise TruncatedInstrument(
                f"partial instrument header at payload offset "
                f"0x{base_offset + record_start:X} ({end - pos} bytes left)",
                base_offset + record_start,
            )
        inst_id = stream[pos]
        (name_len,) = struct.unpack_from(">I", stream, pos + 1)
        pos += 5

        if end - pos < name_len + PATTERN_SIZE:
            raise TruncatedInstrument(
                f"instrument record at payload offset 0x{base_offset + record_start:X} "
                f"needs {name_len + PATTERN_SIZE} more bytes, {end - pos} left",
                base_offset + record_start,
            )
        name = stream[pos : pos + name_len].decode("utf-8", errors="replace")
        pos += name_len
        pattern = Pattern.from_bytes(stream[pos : pos + PATTERN_SIZE])
        pos += PATTERN_SIZE

        logger.debug(
            "instrument id=%d name=%r at payload offset 0x%X",
            inst_id,
            name,
            base_offset + record_start,
        )
        yield Instrument(id=inst_id, name=name, pattern=pattern)


def decode(data: bytes) -> SpliceFile:
    """Parse a complete SPLICE buffer into a :class:`SpliceFile`."""

    _, payload = read_header(data)
    if len(payload) < PAYLOAD_PREAMBLE_SIZE:
        raise TruncatedInput(
            f"payload too short ({len(payload)} bytes, need {PAYLOAD_PREAMBLE_SIZE})"
        )

    hardware_string = trim_hardware_string(payload[:HW_STRING_SIZE])
    (tempo,) = struct.unpack_from("<f", payload, HW_STRING_SIZE)
    instruments = tuple(
        iter_instruments(
            payload[PAYLOAD_PREAMBLE_SIZE:], base_offset=PAYLOAD_PREAMBLE_SIZE
        )
    )
    return SpliceFile(
        hardware_string=hardware_string,
        tempo=tempo,
        instruments=instruments,
    )
