# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: Bitcoin legacy tx serialization; SIGHASH_ALL
from __future__ import annotations

from ..utils import config as CFG
from ..utils.helpers import Script, hash256, serialize_tx


class Tx:
    def __init__(self, version: int = 1, locktime: int = 0, inputs=None, outputs=None):
        self.version = int(version)
        self.inputs = list(inputs or [])
        self.outputs = list(outputs or [])
        self.locktime = int(locktime)

    # -------- Signing ----------

    def sign_input(self, index: int, subscript, private_key):
        from ..signing.signer import sign_input
        return sign_input(self, index, subscript, private_key)

    def has_blank_scripts(self) -> bool:
        return all(txin.script_sig.is_empty() for txin in self.inputs)

    # -------- IDs ----------

    def serialize(self) -> bytes:
        return serialize_tx(self)

    def compute_txid(self) -> bytes:
        return hash256(self.serialize())[::-1]

    # -------- Serde ----------

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "inputs": [txin.to_dict() for txin in self.inputs],
            "outputs": [txout.to_dict() for txout in self.outputs],
            "locktime": self.locktime,}

    @classmethod
    def from_dict(cls, data: dict):
        if isinstance(data, Tx):
            return data
        if not isinstance(data, dict):
            raise TypeError("from_dict expects dict or Tx")
        return cls(
            version=data.get("version", 1),
            inputs=[TxIn.from_dict(x) for x in data.get("inputs", [])],
            outputs=[TxOut.from_dict(x) for x in data.get("outputs", [])],
            locktime=data.get("locktime", 0),)

    def __repr__(self):
        return f"<Tx v={self.version} vin={len(self.inputs)} vout={len(self.outputs)} lock={self.locktime}>"


class TxIn:
    def __init__(self, txid: bytes, vout: int, script_sig: Script = None, sequence: int = CFG.DEFAULT_SEQUENCE):
        if not isinstance(txid, (bytes, bytearray)) or len(txid) != 32:
            raise ValueError("txid must be 32-byte bytes")
        if not isinstance(vout, int):
            raise TypeError("vout must be an integer")
        if not (0 <= vout <= 0xFFFFFFFF):
            raise ValueError("vout must be a 32-bit unsigned integer")
        if not isinstance(sequence, int) or not (0 <= sequence <= 0xFFFFFFFF):
            raise ValueError("sequence must be a 32-bit unsigned integer")

        self.txid = bytes(txid)
        self.vout = int(vout)
        self.script_sig = script_sig or Script([])
        self.sequence = int(sequence)

    def to_dict(self) -> dict:
        return {
            "txid": self.txid.hex(),
            "vout": self.vout,
            "script_sig": self.script_sig.serialize().hex(),
            "sequence": self.sequence,}

    @classmethod
    def from_dict(cls, data: dict):
        if not isinstance(data, dict):
            raise TypeError("TxIn.from_dict expects dict")
        raw = bytes.fromhex(data["script_sig"]) if data.get("script_sig") else b""
        return cls(
            txid=bytes.fromhex(data["txid"]),
            vout=int(data["vout"]),
            script_sig=Script.deserialize(raw) if raw else Script([]),
            sequence=int(data.get("sequence", CFG.DEFAULT_SEQUENCE)),)

    def __repr__(self):
        return f"<TxIn {self.txid.hex()}:{self.vout} seq={self.sequence:#x}>"


class TxOut:
    def __init__(self, amount: int, script_pubkey: Script):
        if not isinstance(amount, int) or amount < 0:
            raise ValueError("amount must be integer >= 0")
        if not isinstance(script_pubkey, Script):
            raise TypeError("script_pubkey must be Script instance")

        self.amount = amount
        self.script_pubkey = script_pubkey

    def to_dict(self) -> dict:
        return {
            "amount": self.amount,
            "script_pubkey": self.script_pubkey.serialize().hex(),}

    @classmethod
    def from_dict(cls, data: dict):
        if not isinstance(data, dict):
            raise TypeError("TxOut.from_dict expects dict")
        return cls(amount=int(data["amount"]), script_pubkey=Script.deserialize(bytes.fromhex(data["script_pubkey"])))

    def __repr__(self):
        return f"<TxOut amt={self.amount}>"
