# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: sipa/bitcoin a81cd9680 (even-S); BIP66-DER
from __future__ import annotations

from dataclasses import dataclass

from ..utils import config as CFG
from ..utils.helpers import (SECP256K1_N, require, der_encode_sig_strict, der_parse_sig_strict)


# ---------- Canonical S ----------

def is_canonical_s(s) -> bool:
    """Even s is canonical. Accepts the 32-byte field or the integer."""
    if isinstance(s, (bytes, bytearray)):
        return len(s) > 0 and (s[-1] & 1) == 0
    return (int(s) & 1) == 0

def canonicalize_s(s: int, order: int = SECP256K1_N) -> int:
    # order is odd, so exactly one of s and order - s is even
    if s & 1:
        s = order - s
    return s


def pack_int(x: int, width: int = CFG.SIGNATURE_FIELD_BYTES) -> bytes:
    """Big-endian, left-zero-padded to exactly `width` bytes."""
    require(x >= 0, "signature integer must be non-negative")
    require((x.bit_length() + 7) // 8 <= width, f"signature integer exceeds {width} bytes")
    return x.to_bytes(width, "big")


# ========== Signature ==========

@dataclass(frozen=True)
class Signature:
    r: bytes
    s: bytes

    def __post_init__(self):
        for name in ("r", "s"):
            v = getattr(self, name)
            if not isinstance(v, (bytes, bytearray)):
                raise TypeError(f"{name} must be bytes")
            if len(v) != CFG.SIGNATURE_FIELD_BYTES:
                raise ValueError(f"{name} must be exactly {CFG.SIGNATURE_FIELD_BYTES} bytes")
            object.__setattr__(self, name, bytes(v))

    @classmethod
    def from_ints(cls, r: int, s: int) -> "Signature":
        return cls(pack_int(r), pack_int(s))

    @property
    def r_int(self) -> int:
        return int.from_bytes(self.r, "big")

    @property
    def s_int(self) -> int:
        return int.from_bytes(self.s, "big")

    @property
    def is_canonical(self) -> bool:
        return is_canonical_s(self.s)

    # -------- Serde ----------

    def to_bytes(self) -> bytes:
        return self.r + self.s

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Signature":
        w = CFG.SIGNATURE_FIELD_BYTES
        if len(raw) != 2 * w:
            raise ValueError(f"compact signature must be {2 * w} bytes")
        return cls(raw[:w], raw[w:])

    def to_dict(self) -> dict:
        return {"r": self.r.hex(), "s": self.s.hex()}

    @classmethod
    def from_dict(cls, data: dict) -> "Signature":
        if not isinstance(data, dict):
            raise TypeError("Signature.from_dict expects dict")
        return cls(bytes.fromhex(data["r"]), bytes.fromhex(data["s"]))

    def to_der(self) -> bytes:
        return der_encode_sig_strict(self.r_int, self.s_int)

    @classmethod
    def from_der(cls, der: bytes) -> "Signature":
        r, s = der_parse_sig_strict(der)
        return cls.from_ints(r, s)

    def __repr__(self):
        return f"<Signature r={self.r.hex()[:16]}… s={self.s.hex()[:16]}… canonical={self.is_canonical}>"
