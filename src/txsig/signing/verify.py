# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: sipa/bitcoin a81cd9680 (even-S); BIP16-P2SH; SEC1
from __future__ import annotations

from ecdsa import util

from ..core.signature import Signature
from ..utils import config as CFG
from ..utils.helpers import as_verifying_key, is_p2sh, require, to_bytes
from .sighash import compute_input_digest

# ---------------- Logger ----------------
from ..utils.txsig_logging import get_ctx_logger
log = get_ctx_logger('txsig.signing.verify')


def verify(digest32: bytes, signature: Signature, public_key) -> bool:
    """Check one signature over a digest. Every failure is reported as False.

    Non-canonical (odd s) signatures are rejected; with CFG.STRICT_CANONICAL_ASSERT
    they are treated as an internal consistency fault instead.
    """
    if not isinstance(signature, Signature):
        log.debug("[verify] no signature to check (%s)", type(signature).__name__)
        return False
    if CFG.STRICT_CANONICAL_ASSERT:
        require(signature.is_canonical, "signature s must be even before verification")
    elif not signature.is_canonical:
        log.debug("[verify] rejecting non-canonical signature (odd s)")
        return False

    try:
        vk = as_verifying_key(public_key)
    except Exception as e:
        log.debug("[verify] public key does not decode: %s", e)
        return False

    try:
        sig_tuple = util.sigdecode_strings((signature.r, signature.s), vk.curve.order)
    except Exception as e:
        log.debug("[verify] r/s fields do not decode: %s", e)
        return False

    try:
        return bool(vk.verify_digest(
            sig_tuple,
            bytes(digest32),
            sigdecode=lambda sig, order: sig,
            allow_truncate=False,))
    except Exception as e:
        # BadSignatureError (invalid) and malformed values (r/s out of range, bad digest) alike
        log.debug("[verify] signature rejected: %s", type(e).__name__)
        return False


def verify_2of2(tx, input_index: int, spent_output, key1, key2, sig1: Signature, sig2: Signature) -> bool:
    """Both signatures must verify under their own key, in the given order.

    The spent output's scriptPubKey is the subscript for the digest.
    """
    script = to_bytes(getattr(spent_output, "script_pubkey", spent_output))
    require(is_p2sh(script), "2-of-2 check requires a P2SH spent output")
    digest = compute_input_digest(tx, input_index, script)

    return verify(digest, sig1, key1) and verify(digest, sig2, key2)
