# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: Bitcoin legacy SignatureHash (SIGHASH_ALL only)
"""Per-input signing digest.

The preimage is the legacy transaction serialization with every input script
blanked except the one being signed, which carries ``subscript``, followed by
the hash type as LE32. The transaction object is only read: the substitution
happens in the local byte string, so concurrent digests over the same ``Tx``
cannot see each other.
"""
from __future__ import annotations

from ..utils import config as CFG
from ..utils.helpers import (encode_varint, hash256, require, to_bytes,
                             _serialize_txin, _serialize_txout)

# ---------------- Logger ----------------
from ..utils.txsig_logging import TRACE, get_ctx_logger
log = get_ctx_logger('txsig.signing.sighash')


def _check_preconditions(tx, input_index: int) -> None:
    require(0 <= input_index < len(tx.inputs),
            f"input index {input_index} out of range for {len(tx.inputs)} inputs")
    for i, txin in enumerate(tx.inputs):
        require(len(to_bytes(txin.script_sig)) == 0,
                f"input {i} script must be empty before computing a signature digest")


def serialize_tx_for_sighash(tx, input_index: int, subscript) -> bytes:
    _check_preconditions(tx, input_index)
    script = to_bytes(subscript)

    res = int(tx.version).to_bytes(4, 'little')
    res += encode_varint(len(tx.inputs))
    for i, txin in enumerate(tx.inputs):
        res += _serialize_txin(txin, script if i == input_index else b"")
    res += encode_varint(len(tx.outputs))
    for txout in tx.outputs:
        res += _serialize_txout(txout)
    res += int(getattr(tx, 'locktime', 0)).to_bytes(4, 'little')
    return res


def compute_input_digest(tx, input_index: int, subscript) -> bytes:
    preimage = serialize_tx_for_sighash(tx, input_index, subscript)
    preimage += int(CFG.SIGHASH_ALL).to_bytes(4, 'little')
    digest = hash256(preimage)
    if log.isEnabledFor(TRACE):
        log.trace("[sighash] input=%d preimage=%dB digest=%s", input_index, len(preimage), digest.hex())
    return digest
