# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: protobuf fixed64 wire type
"""Fixed-width transport form of a Signature.

A signature travels as eight unsigned 64-bit fields, ``r1..r4`` then
``s1..s4``. Field ``rN`` carries bytes ``8*(N-1) .. 8*N`` of the 32-byte
big-endian ``r`` exactly as they sit in memory, likewise for ``s``. The chunk
is never reinterpreted: the integer stored in a field is the one whose
little-endian image is the chunk, which is also what a fixed64 puts on the
wire, so the eight fields serialize back to the original 64 bytes.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, fields
from typing import Tuple

from ..core.signature import Signature, is_canonical_s
from ..utils import config as CFG
from ..utils.helpers import require

FIELD_NAMES = ("r1", "r2", "r3", "r4", "s1", "s2", "s3", "s4")
_WIRE_STRUCT = struct.Struct("<8Q")
_U64_MAX = (1 << 64) - 1


@dataclass(frozen=True)
class WireSignature:
    r1: int
    r2: int
    r3: int
    r4: int
    s1: int
    s2: int
    s3: int
    s4: int

    def __post_init__(self):
        for f in fields(self):
            v = getattr(self, f.name)
            if not isinstance(v, int) or not (0 <= v <= _U64_MAX):
                raise ValueError(f"{f.name} must be an unsigned 64-bit integer")

    def values(self) -> Tuple[int, ...]:
        return tuple(getattr(self, name) for name in FIELD_NAMES)

    def to_bytes(self) -> bytes:
        return _WIRE_STRUCT.pack(*self.values())

    @classmethod
    def from_bytes(cls, raw: bytes) -> "WireSignature":
        if len(raw) != _WIRE_STRUCT.size:
            raise ValueError(f"wire signature must be {_WIRE_STRUCT.size} bytes")
        return cls(*_WIRE_STRUCT.unpack(raw))

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in FIELD_NAMES}

    @classmethod
    def from_dict(cls, data: dict) -> "WireSignature":
        if not isinstance(data, dict):
            raise TypeError("WireSignature.from_dict expects dict")
        return cls(**{name: int(data[name]) for name in FIELD_NAMES})


def _split(value: bytes):
    w = CFG.WIRE_FIELD_BYTES
    return [int.from_bytes(value[i:i + w], "little") for i in range(0, len(value), w)]

def _join(chunks) -> bytes:
    return b"".join(int(c).to_bytes(CFG.WIRE_FIELD_BYTES, "little") for c in chunks)


def encode(signature: Signature) -> WireSignature:
    """Locally produced signatures only: odd s here means a bug upstream."""
    require(is_canonical_s(signature.s), "refusing to encode a signature with odd s")
    return WireSignature(*_split(signature.r), *_split(signature.s))


def decode(wire: WireSignature) -> Tuple[Signature, bool]:
    """Always reconstructs; canonicity is reported, not enforced."""
    n = CFG.WIRE_FIELDS_PER_VALUE
    vals = wire.values()
    sig = Signature(_join(vals[:n]), _join(vals[n:]))
    return sig, is_canonical_s(sig.s)
