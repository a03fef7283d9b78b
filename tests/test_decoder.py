from pathlib import Path
import struct
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from splice.decoder import decode, iter_instruments, read_header  # noqa: E402
from splice.errors import (  # noqa: E402
    FormatError,
    InvalidMagic,
    InvalidStepValue,
    TruncatedInput,
    TruncatedInstrument,
)
from splice.model import SpliceFile  # noqa: E402

FIXTURES = REPO_ROOT / "tests" / "fixtures"

KICK_STEPS = [1, 0, 0, 0] * 4


def _record(inst_id: int, name: bytes, steps: list[int]) -> bytes:
    return struct.pack(">BI", inst_id, len(name)) + name + bytes(steps)


def _payload(hw: bytes = b"0.808-alpha", tempo: float = 120.0, records: bytes = b"") -> bytes:
    return hw.ljust(32, b"\x00") + struct.pack("<f", tempo) + records


def _wrap(payload: bytes, trailer: bytes = b"", length: int | None = None) -> bytes:
    declared = len(payload) if length is None else length
    return b"SPLICE" + struct.pack(">Q", declared) + payload + trailer


def test_decode_single_instrument() -> None:
    data = _wrap(_payload(records=_record(0, b"kick", KICK_STEPS)))
    result = decode(data)

    assert result.hardware_string == "0.808-alpha"
    assert result.tempo == 120.0
    assert len(result.instruments) == 1
    inst = result.instruments[0]
    assert (inst.id, inst.name) == (0, "kick")
    assert inst.pattern.measures == ((1, 0, 0, 0),) * 4


def test_hardware_string_strips_only_trailing_nulls() -> None:
    data = _wrap(_payload(hw=b"0.808-alpha"))
    assert decode(data).hardware_string == "0.808-alpha"

    full = b"A" * 32
    assert decode(_wrap(_payload(hw=full))).hardware_string == "A" * 32


def test_tempo_is_little_endian() -> None:
    payload = b"hw".ljust(32, b"\x00") + bytes.fromhex("cdccc442")
    result = decode(_wrap(payload))
    assert result.tempo == pytest.approx(98.4, abs=1e-5)


def test_instruments_keep_encounter_order() -> None:
    records = b"".join(
        _record(inst_id, name, KICK_STEPS)
        for inst_id, name in [(40, b"kick"), (1, b"clap"), (3, b"hh-open"), (5, b"low-tom")]
    )
    result = decode(_wrap(_payload(records=records)))
    assert [inst.id for inst in result.instruments] == [40, 1, 3, 5]


def test_empty_instrument_stream() -> None:
    result = decode(_wrap(_payload()))
    assert result.instruments == ()


def test_trailer_is_ignored() -> None:
    payload = _payload(records=_record(7, b"tom", KICK_STEPS))
    # Trailer garbage would be a truncated record and a bad step if parsed.
    result = decode(_wrap(payload, trailer=b"\x09\xff\xff\xff\xff\x05"))
    assert [inst.name for inst in result.instruments] == ["tom"]


def test_declared_length_shorter_than_buffer_limits_payload() -> None:
    first = _record(1, b"Kick", KICK_STEPS)
    second = _record(2, b"HiHat", [1, 0] * 8)
    payload = _payload(records=first + second)
    data = _wrap(payload, length=len(payload) - len(second))
    assert [inst.name for inst in decode(data).instruments] == ["Kick"]


def test_invalid_magic() -> None:
    data = b"SPLICF" + _wrap(_payload())[6:]
    with pytest.raises(InvalidMagic):
        decode(data)


def test_empty_buffer_is_invalid_magic() -> None:
    with pytest.raises(InvalidMagic):
        decode(b"")


def test_length_field_cut_short() -> None:
    with pytest.raises(TruncatedInput):
        decode(b"SPLICE\x00\x00")


def test_declared_length_exceeds_buffer() -> None:
    payload = _payload()
    with pytest.raises(TruncatedInput):
        decode(_wrap(payload, length=len(payload) + 1))


def test_payload_too_short_for_tempo() -> None:
    with pytest.raises(TruncatedInput):
        decode(_wrap(b"0.808".ljust(32, b"\x00") + b"\x00\x00"))


@pytest.mark.parametrize("cut", [1, 3, 5, 8, 20])
def test_partial_instrument_record(cut: int) -> None:
    record = _record(3, b"snare", KICK_STEPS)
    payload = _payload(records=_record(0, b"kick", KICK_STEPS) + record[:cut])
    with pytest.raises(TruncatedInstrument) as excinfo:
        decode(_wrap(payload))
    assert excinfo.value.offset == 36 + len(_record(0, b"kick", KICK_STEPS))


def test_step_value_outside_on_off() -> None:
    steps = KICK_STEPS[:]
    steps[5] = 2
    with pytest.raises(InvalidStepValue):
        decode(_wrap(_payload(records=_record(0, b"kick", steps))))


def test_format_errors_are_value_errors() -> None:
    assert issubclass(FormatError, ValueError)
    for cls in (InvalidMagic, TruncatedInput, TruncatedInstrument, InvalidStepValue):
        assert issubclass(cls, FormatError)


def test_read_header_returns_declared_payload() -> None:
    payload = _payload()
    length, body = read_header(_wrap(payload, trailer=b"junk"))
    assert length == len(payload)
    assert body == payload


def test_iter_instruments_empty_stream() -> None:
    assert list(iter_instruments(b"")) == []


def test_name_length_zero() -> None:
    result = decode(_wrap(_payload(records=_record(9, b"", KICK_STEPS))))
    assert result.instruments[0].name == ""


def test_accepts_bytearray() -> None:
    data = bytearray(_wrap(_payload(records=_record(0, b"kick", KICK_STEPS))))
    assert decode(data).instruments[0].name == "kick"


def test_accepts_memoryview() -> None:
    data = _wrap(_payload(records=_record(0, b"k", KICK_STEPS)))
    result = decode(memoryview(data))
    assert result.instruments[0].name == "k"
    assert result.hardware_string == "0.808-alpha"


def test_from_bytes_matches_decode() -> None:
    data = (FIXTURES / "pattern_1.splice").read_bytes()
    assert SpliceFile.from_bytes(data) == decode(data)


def test_fixture_with_trailer_decodes() -> None:
    result = decode((FIXTURES / "pattern_5.splice").read_bytes())
    assert result.hardware_string == "0.708-alpha"
    assert result.tempo == 999.0
    assert [(inst.id, inst.name) for inst in result.instruments] == [
        (1, "Kick"),
        (2, "HiHat"),
    ]
