# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: SIGHASH_ALL; even-S

from .sighash import compute_input_digest, serialize_tx_for_sighash
from .signer import sign_hash, sign_input
from .verify import verify, verify_2of2
from .wire import WireSignature, encode, decode
__all__ = ["compute_input_digest", "serialize_tx_for_sighash", "sign_hash", "sign_input",
           "verify", "verify_2of2", "WireSignature", "encode", "decode"]
