"""Cursor-tracked bit reader/writer over a growable byte buffer.

Bits are packed least significant first: the first bit written lands in bit 0
of byte 0, and a value that straddles a byte boundary keeps its low bits in the
earlier byte. Wider reads and writes are chains of 8-bit operations, low half
first.
"""

from __future__ import annotations

import math
from typing import Callable, Final, TypeVar

from .errors import BitRangeError, EndOfDataError, Utf8Error

T = TypeVar("T")

MAX_STRING_BYTES: Final[int] = 0xFF

_LOW_MASK: Final[tuple[int, ...]] = tuple((1 << n) - 1 for n in range(9))


def decode_utf8(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8Error(f"invalid UTF-8 string: {raw!r}") from exc


def _check_width(bits: int, width: int) -> None:
    if not 0 <= int(bits) <= width:
        raise BitRangeError(f"bit count {bits} out of range for a {width}-bit value")


def _check_fits(value: int, bits: int, width: int) -> None:
    if value < 0 or value >> width:
        raise BitRangeError(f"value {value} is not an unsigned {width}-bit integer")
    if bits != width and value >> bits:
        raise BitRangeError(f"value {value} overflows {bits} bits")


class BitStream:
    __slots__ = ("_data", "_byte_offset", "_bit_offset")

    def __init__(self, data: bytes | bytearray | None = None) -> None:
        self._data = bytearray(data or b"")
        self._byte_offset = 0
        self._bit_offset = 0

    @property
    def byte_offset(self) -> int:
        return self._byte_offset

    @property
    def bit_offset(self) -> int:
        return self._bit_offset

    def __len__(self) -> int:
        return len(self._data)

    def eof(self) -> bool:
        return self._byte_offset >= len(self._data)

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def seek(self, byte_offset: int, bit_offset: int = 0) -> None:
        if byte_offset < 0:
            raise BitRangeError(f"negative byte offset: {byte_offset}")
        if not 0 <= bit_offset < 8:
            raise BitRangeError(f"bit offset must be in [0, 8), got {bit_offset}")
        self._byte_offset = int(byte_offset)
        self._bit_offset = int(bit_offset)

    # -- 8-bit primitives --------------------------------------------------

    def read_bits_u8(self, bits: int) -> int:
        if not 0 <= bits <= 8:
            raise BitRangeError(f"cannot read {bits} bits into an 8-bit value")
        size = len(self._data)
        if self._byte_offset >= size or (
            self._byte_offset == size - 1 and self._bit_offset + bits > 8
        ):
            raise EndOfDataError(
                f"read of {bits} bits past end of data (byte {self._byte_offset}, bit {self._bit_offset}, size {size})"
            )

        current = self._data[self._byte_offset]
        if self._bit_offset + bits >= 8:
            extra = self._bit_offset + bits - 8
            remain = bits - extra
            result = current >> self._bit_offset
            self._byte_offset += 1
            if extra:
                result |= (self._data[self._byte_offset] & _LOW_MASK[extra]) << remain
            self._bit_offset = extra
        else:
            result = (current >> self._bit_offset) & _LOW_MASK[bits]
            self._bit_offset += bits
        return result

    def write_bits_u8(self, value: int, bits: int) -> None:
        if not 0 <= bits <= 8:
            raise BitRangeError(f"cannot write {bits} bits from an 8-bit value")
        value = int(value)
        _check_fits(value, bits, 8)
        if bits == 0:
            return
        value &= _LOW_MASK[bits]

        self._reserve(self._byte_offset)
        if self._bit_offset + bits >= 8:
            extra = self._bit_offset + bits - 8
            remain = bits - extra
            self._data[self._byte_offset] |= (value & _LOW_MASK[remain]) << self._bit_offset
            self._byte_offset += 1
            if extra:
                self._reserve(self._byte_offset)
                self._data[self._byte_offset] |= value >> remain
            self._bit_offset = extra
        else:
            self._data[self._byte_offset] |= value << self._bit_offset
            self._bit_offset += bits

    def _reserve(self, index: int) -> None:
        missing = index + 1 - len(self._data)
        if missing > 0:
            self._data.extend(bytes(missing))

    # -- wider integers ----------------------------------------------------

    def _read_split(self, bits: int, width: int, read_half: Callable[[int], int]) -> int:
        _check_width(bits, width)
        half = width // 2
        lower = read_half(min(bits, half))
        if bits <= half:
            return lower
        upper = read_half(bits - half)
        return lower | (upper << half)

    def _write_split(self, value: int, bits: int, width: int, write_half: Callable[[int, int], None]) -> None:
        _check_width(bits, width)
        value = int(value)
        _check_fits(value, bits, width)
        half = width // 2
        write_half(value & ((1 << half) - 1), min(bits, half))
        if bits > half:
            write_half(value >> half, bits - half)

    def read_bits_u16(self, bits: int) -> int:
        return self._read_split(bits, 16, self.read_bits_u8)

    def read_bits_u32(self, bits: int) -> int:
        return self._read_split(bits, 32, self.read_bits_u16)

    def read_bits_u64(self, bits: int) -> int:
        return self._read_split(bits, 64, self.read_bits_u32)

    def write_bits_u16(self, value: int, bits: int) -> None:
        self._write_split(value, bits, 16, self.write_bits_u8)

    def write_bits_u32(self, value: int, bits: int) -> None:
        self._write_split(value, bits, 32, self.write_bits_u16)

    def write_bits_u64(self, value: int, bits: int) -> None:
        self._write_split(value, bits, 64, self.write_bits_u32)

    # -- fixed-width helpers -----------------------------------------------

    def read_bool(self) -> bool:
        return self.read_bits_u8(1) == 1

    def write_bool(self, value: bool) -> None:
        self.write_bits_u8(1 if value else 0, 1)

    def read_u8(self) -> int:
        return self.read_bits_u8(8)

    def read_u16(self) -> int:
        return self.read_bits_u16(16)

    def read_u32(self) -> int:
        return self.read_bits_u32(32)

    def read_u64(self) -> int:
        return self.read_bits_u64(64)

    def write_u8(self, value: int) -> None:
        self.write_bits_u8(value, 8)

    def write_u16(self, value: int) -> None:
        self.write_bits_u16(value, 16)

    def write_u32(self, value: int) -> None:
        self.write_bits_u32(value, 32)

    def write_u64(self, value: int) -> None:
        self.write_bits_u64(value, 64)

    # -- composite helpers -------------------------------------------------

    def read_string(self) -> str:
        length = self.read_u8()
        raw = bytes(self.read_u8() for _ in range(length))
        return decode_utf8(raw)

    def write_string(self, value: str) -> None:
        raw = value.encode("utf-8")
        if len(raw) > MAX_STRING_BYTES:
            raise BitRangeError(f"string too long: {len(raw)} bytes (max {MAX_STRING_BYTES})")
        self.write_u8(len(raw))
        for byte in raw:
            self.write_u8(byte)

    def read_optional(self, read_fn: Callable[[BitStream], T]) -> T | None:
        if self.read_bool():
            return read_fn(self)
        return None

    def write_optional(self, value: T | None, write_fn: Callable[[BitStream, T], None]) -> None:
        if value is None:
            self.write_bool(False)
            return
        self.write_bool(True)
        write_fn(self, value)

    def read_scaled_float(self, bits: int, scale: float, offset: float) -> float:
        raw = self.read_bits_u64(bits)
        return float(raw) * scale + offset

    def write_scaled_float(self, value: float, bits: int, scale: float, offset: float) -> None:
        scaled = (float(value) - offset) / scale
        if not math.isfinite(scaled):
            raise BitRangeError(f"cannot quantize {value!r} to {bits} bits")
        # Truncates toward zero; out-of-range results are rejected by the width check.
        self.write_bits_u64(int(scaled), bits)
