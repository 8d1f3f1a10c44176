# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: CompactSize; SEC1; libsecp256k1; BIP66-DER
from __future__ import annotations
import hashlib
from typing import Tuple, Union
from ecdsa import SECP256k1, SigningKey, VerifyingKey

from ..utils import config as CFG

# opcode constants
OP_0 = 0x00
OP_PUSHDATA1 = 0x4c
OP_PUSHDATA2 = 0x4d
OP_PUSHDATA4 = 0x4e
OP_2 = 0x52
OP_CHECKMULTISIG = 0xAE
OP_HASH160 = 0xA9
OP_EQUAL = 0x87

# ======== CURVE CONSTANTS ========
SECP256K1_N = SECP256k1.order


class SignatureInvariantError(AssertionError):
    """A caller broke a documented precondition; the operation must not continue."""


def require(cond: bool, msg: str) -> None:
    if not cond:
        raise SignatureInvariantError(msg)


# -----------------------------
# BYTES COERCION
# -----------------------------

def to_bytes(x) -> bytes:
    if isinstance(x, Script):
        return x.serialize()
    if isinstance(x, (bytes, bytearray, memoryview)):
        return bytes(x)
    if isinstance(x, str):
        return bytes.fromhex(x)
    raise TypeError(f"cannot convert {type(x).__name__} to bytes")


# -----------------------------
# SCRIPT SHAPES
# -----------------------------

def is_p2sh(spk: bytes) -> bool:
    return len(spk) == 23 and spk[0] == OP_HASH160 and spk[1] == 0x14 and spk[-1] == OP_EQUAL


# -----------------------------
# HASHING
# -----------------------------

def sha256(b: bytes) -> bytes:
    return hashlib.sha256(b).digest()

def ripemd160(b: bytes) -> bytes:
    h = hashlib.new('ripemd160')
    h.update(b)
    return h.digest()

def hash160(b: bytes) -> bytes:
    return ripemd160(sha256(b))

def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


# -----------------------------
# VARINT ENCODING (Bitcoin-style)
# -----------------------------

def encode_varint(i: int) -> bytes:
    if i < 0xfd:
        return i.to_bytes(1, 'little')
    elif i <= 0xffff:
        return b'\xfd' + i.to_bytes(2, 'little')
    elif i <= 0xffffffff:
        return b'\xfe' + i.to_bytes(4, 'little')
    else:
        return b'\xff' + i.to_bytes(8, 'little')

def serialize_bytes_with_len(b: bytes) -> bytes:
    return encode_varint(len(b)) + b


# ========== Low-level tx serializers ===========

def _serialize_outpoint(txid: bytes, vout: int) -> bytes:
    return txid[::-1] + int(vout).to_bytes(4, 'little')


def _serialize_txin(txin, script_bytes: bytes | None = None) -> bytes:
    if script_bytes is None:
        script_bytes = to_bytes(txin.script_sig)
    out = _serialize_outpoint(txin.txid, txin.vout)
    out += serialize_bytes_with_len(script_bytes)
    seq = getattr(txin, 'sequence', CFG.DEFAULT_SEQUENCE)
    out += int(seq).to_bytes(4, 'little')
    return out


def _serialize_txout(txout) -> bytes:
    out = int(txout.amount).to_bytes(8, 'little')
    out += serialize_bytes_with_len(to_bytes(txout.script_pubkey))
    return out


def serialize_tx(tx) -> bytes:
    """Legacy (non-witness) layout, the same bytes that go on the wire for broadcast."""
    res = int(tx.version).to_bytes(4, 'little')
    res += encode_varint(len(tx.inputs))
    for txin in tx.inputs:
        res += _serialize_txin(txin)
    res += encode_varint(len(tx.outputs))
    for txout in tx.outputs:
        res += _serialize_txout(txout)
    res += int(getattr(tx, 'locktime', 0)).to_bytes(4, 'little')
    return res


# ========== Script Class ==========

class Script:

    def __init__(self, cmds: list = None):
        self.cmds = list(cmds) if cmds else []

    @staticmethod
    def _encode_pushdata(b: bytes) -> bytes:
        n = len(b)
        if n <= 75:
            return bytes([n]) + b
        elif n <= 255:
            return b'\x4c' + bytes([n]) + b
        elif n <= 65535:
            return b'\x4d' + n.to_bytes(2, 'little') + b
        else:
            return b'\x4e' + n.to_bytes(4, 'little') + b

    @classmethod
    def _read_push_or_opcode(cls, first: int, data: bytes, i: int):
        if 1 <= first <= 75:
            end = i + first
            if end > len(data):
                raise ValueError("script short read (small push)")
            return data[i:end], end

        if first == OP_0:
            return OP_0, i

        widths = {OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4}
        if first in widths:
            w = widths[first]
            if i + w > len(data):
                raise ValueError("script short read (PUSHDATA header)")
            n = int.from_bytes(data[i:i+w], 'little')
            i += w
            end = i + n
            if end > len(data):
                raise ValueError("script short read (PUSHDATA payload)")
            return data[i:end], end

        return first, i

    def serialize(self) -> bytes:
        out = bytearray()
        for cmd in self.cmds:
            if isinstance(cmd, int):
                out.append(cmd & 0xff)  # opcode
            elif isinstance(cmd, (bytes, bytearray)):
                out += self._encode_pushdata(bytes(cmd))
            else:
                raise TypeError(f"Unsupported script cmd type: {type(cmd)}")
        return bytes(out)

    @classmethod
    def deserialize(cls, data: bytes) -> 'Script':
        cmds = []
        i = 0
        n = len(data)
        while i < n:
            first = data[i]
            i += 1
            item, i = cls._read_push_or_opcode(first, data, i)
            cmds.append(item)
        return cls(cmds)

    def is_empty(self) -> bool:
        return not self.cmds

    def __len__(self):
        return len(self.serialize())

    def __eq__(self, other):
        if not isinstance(other, Script):
            return NotImplemented
        return self.serialize() == other.serialize()

    # ---------------------------
    # Templates
    # ---------------------------
    @staticmethod
    def p2sh_script(redeem_script: Union['Script', bytes]) -> 'Script':
        return Script([OP_HASH160, hash160(to_bytes(redeem_script)), OP_EQUAL])

    @staticmethod
    def multisig_2of2(pubkey1: bytes, pubkey2: bytes) -> 'Script':
        return Script([OP_2, bytes(pubkey1), bytes(pubkey2), OP_2, OP_CHECKMULTISIG])


# ========== Keys ==========

def as_signing_key(private_key) -> SigningKey:
    if isinstance(private_key, SigningKey):
        return private_key
    if isinstance(private_key, str):
        private_key = bytes.fromhex(private_key)
    if not isinstance(private_key, (bytes, bytearray)) or len(private_key) != 32:
        raise ValueError("private key must be a SigningKey, 32 bytes or 64 hex chars")
    return SigningKey.from_string(bytes(private_key), curve=SECP256k1)

def as_verifying_key(public_key) -> VerifyingKey:
    """Decode SEC1 (compressed/uncompressed) or raw X||Y bytes into a curve point.

    Raises ecdsa's MalformedPointError (a ValueError subclass) or TypeError on bad input.
    """
    if isinstance(public_key, VerifyingKey):
        return public_key
    if not isinstance(public_key, (bytes, bytearray)):
        raise TypeError("public key must be bytes or VerifyingKey")
    return VerifyingKey.from_string(bytes(public_key), curve=SECP256k1)

def pubkey_from_privkey(private_key, compressed: bool = True) -> bytes:
    vk = as_signing_key(private_key).get_verifying_key()
    return vk.to_string("compressed" if compressed else "uncompressed")


# ========== Strict DER ==========

class DerSigError(ValueError):
    pass

def _int_from_bytes(b: bytes) -> int:
    return int.from_bytes(b, "big", signed=False)

def _int_to_bytes(i: int) -> bytes:
    if i < 0:
        raise ValueError("negative integer")
    if i == 0:
        return b"\x00"
    length = (i.bit_length() + 7) // 8
    return i.to_bytes(length, "big")

def der_encode_sig_strict(r: int, s: int) -> bytes:
    def enc_int(x: int) -> bytes:
        if x <= 0:
            raise DerSigError("DER int must be positive")
        xb = _int_to_bytes(x)
        if xb[0] & 0x80:
            xb = b"\x00" + xb
        return xb

    r_b = enc_int(r)
    s_b = enc_int(s)
    seq = b"\x02" + bytes([len(r_b)]) + r_b + b"\x02" + bytes([len(s_b)]) + s_b
    return b"\x30" + bytes([len(seq)]) + seq

def der_parse_sig_strict(sig: bytes) -> Tuple[int, int]:
    if not isinstance(sig, (bytes, bytearray)):
        raise DerSigError("signature must be bytes")
    sig = bytes(sig)
    if len(sig) < 8:  # minimal DER with tiny r,s
        raise DerSigError("signature too short")
    if sig[0] != 0x30:
        raise DerSigError("bad sequence tag")
    if sig[1] >= 0x80 or 2 + sig[1] != len(sig):
        raise DerSigError("bad sequence length")

    idx = 2
    values = []
    for name in ("r", "s"):
        if idx + 2 > len(sig) or sig[idx] != 0x02:
            raise DerSigError(f"missing {name} integer tag")
        n = sig[idx + 1]
        idx += 2
        if n == 0 or idx + n > len(sig):
            raise DerSigError(f"invalid {name} length")
        raw = sig[idx:idx + n]
        idx += n
        if raw[0] & 0x80:
            raise DerSigError(f"{name} negative")
        if len(raw) > 1 and raw[0] == 0x00 and not (raw[1] & 0x80):
            raise DerSigError(f"{name} non-minimal")
        v = _int_from_bytes(raw)
        if not (1 <= v < SECP256K1_N):
            raise DerSigError(f"{name} out of range")
        values.append(v)
    if idx != len(sig):
        raise DerSigError("trailing bytes in signature")
    return values[0], values[1]
