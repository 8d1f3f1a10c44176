# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: RFC6979; sipa/bitcoin a81cd9680 (even-S); libsecp256k1
from __future__ import annotations

import hashlib
from typing import Optional

from ecdsa import util
from ecdsa.ecdsa import RSZeroError

from ..core.signature import Signature, canonicalize_s, is_canonical_s
from ..utils import config as CFG
from ..utils.helpers import as_signing_key, require
from .sighash import compute_input_digest

# ---------------- Logger ----------------
from ..utils.txsig_logging import TRACE, get_ctx_logger
log = get_ctx_logger('txsig.signing.signer')


def _raw_sign(sk, digest32: bytes):
    if CFG.SIGN_DETERMINISTIC:
        return sk.sign_digest_deterministic(
            digest32,
            hashfunc=hashlib.sha256,
            sigencode=util.sigencode_strings,
            allow_truncate=False,)
    return sk.sign_digest(digest32, sigencode=util.sigencode_strings, allow_truncate=False)


def sign_hash(digest32: bytes, private_key) -> Optional[Signature]:
    """Sign a 32-byte digest and return the even-S member of the (r, s) / (r, n-s) pair.

    Returns None when the curve primitive fails (degenerate nonce); callers retry
    with fresh randomness or treat it as transient.
    """
    if not isinstance(digest32, (bytes, bytearray)) or len(digest32) != 32:
        raise ValueError("sign_hash expects a 32-byte digest")
    sk = as_signing_key(private_key)

    try:
        r_b, s_b = _raw_sign(sk, bytes(digest32))
    except RSZeroError:
        log.warning("[sign] signing primitive produced r or s == 0")
        if log.isEnabledFor(TRACE):
            log.trace("[sign] failed digest=%s", bytes(digest32).hex())
        return None

    r = int.from_bytes(r_b, "big")
    s = int.from_bytes(s_b, "big")
    order = sk.curve.order
    s = canonicalize_s(s, order)
    require(is_canonical_s(s), "canonicalized s is still odd")

    sig = Signature.from_ints(r, s)
    if log.isEnabledFor(TRACE):
        log.trace("[sign] digest=%s r=%s s=%s", bytes(digest32).hex(), sig.r.hex(), sig.s.hex())
    return sig


def sign_input(tx, input_index: int, subscript, private_key) -> Optional[Signature]:
    return sign_hash(compute_input_digest(tx, input_index, subscript), private_key)
