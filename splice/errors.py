"""Exceptions raised while decoding SPLICE files."""

from __future__ import annotations


class FormatError(ValueError):
    """Input bytes do not match the SPLICE layout."""


class InvalidMagic(FormatError):
    pass


class TruncatedInput(FormatError):
    pass


class TruncatedInstrument(FormatError):
    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset  # payload offset of the partial record


class InvalidStepValue(FormatError):
    pass
