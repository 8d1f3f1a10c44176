# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: SIGHASH_ALL; even-S

import os
import sys

import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC_ROOT = os.path.join(PROJECT_ROOT, "src")
for path in (PROJECT_ROOT, SRC_ROOT):
    if path not in sys.path:
        sys.path.append(path)

from txsig.core.tx import Tx, TxIn, TxOut  # noqa: E402
from txsig.utils.helpers import Script, pubkey_from_privkey  # noqa: E402

PRIV1 = bytes.fromhex("11" * 32)
PRIV2 = bytes.fromhex("22" * 32)
PRIV3 = bytes.fromhex("33" * 32)


def make_tx(n_inputs: int = 2) -> Tx:
    inputs = [TxIn(txid=bytes([0xA0 + i]) * 32, vout=i) for i in range(n_inputs)]
    outputs = [
        TxOut(amount=40_000, script_pubkey=Script([0xA9, b"\x33" * 20, 0x87])),
        TxOut(amount=9_000, script_pubkey=Script([0x76, 0xA9, b"\x44" * 20, 0x88, 0xAC])),
    ]
    return Tx(version=1, inputs=inputs, outputs=outputs, locktime=0)


@pytest.fixture
def tx():
    return make_tx()


@pytest.fixture
def keys():
    return [(priv, pubkey_from_privkey(priv)) for priv in (PRIV1, PRIV2, PRIV3)]


@pytest.fixture
def funding_output():
    # P2SH-shaped output; signing commits to the script bytes, not to what the hash opens to
    return TxOut(amount=50_000, script_pubkey=Script([0xA9, b"\x5c" * 20, 0x87]))
