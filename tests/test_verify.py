# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: SEC1; BIP16-P2SH; sipa/bitcoin a81cd9680 (even-S)

import pytest
from ecdsa import SECP256k1

from txsig.core.signature import Signature, pack_int
from txsig.core.tx import TxOut
from txsig.signing.sighash import compute_input_digest
from txsig.signing.signer import sign_hash, sign_input
from txsig.signing.verify import verify, verify_2of2
from txsig.utils import config as CFG
from txsig.utils.helpers import Script, SignatureInvariantError, pubkey_from_privkey

N = SECP256k1.order
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798

# Known answer built from the curve constants alone: private key d = 1 (public key G)
# and nonce k = 1, so r = Gx and s = k^-1 * (z + r*d) = z + Gx (mod n).
KAT_PUBKEY = bytes.fromhex("02" + f"{GX:064x}")
KAT_DIGEST = bytes.fromhex("02" * 32)
KAT_SIG = Signature.from_ints(GX, (int.from_bytes(KAT_DIGEST, "big") + GX) % N)


def test_known_answer_verifies():
    assert KAT_SIG.is_canonical
    assert verify(KAT_DIGEST, KAT_SIG, KAT_PUBKEY)


@pytest.mark.parametrize("pos", range(64))
def test_known_answer_single_byte_flip_fails(pos):
    raw = bytearray(KAT_SIG.to_bytes())
    raw[pos] ^= 0x02
    assert not verify(KAT_DIGEST, Signature.from_bytes(bytes(raw)), KAT_PUBKEY)


def test_known_answer_wrong_digest_fails():
    assert not verify(b"\x04" * 32, KAT_SIG, KAT_PUBKEY)


def test_uncompressed_pubkey_is_accepted(keys):
    priv, _ = keys[0]
    digest = b"\x07" * 32
    sig = sign_hash(digest, priv)
    assert verify(digest, sig, pubkey_from_privkey(priv, compressed=False))


def test_wrong_but_valid_pubkey_fails(keys):
    (priv1, _), (_, pub2), _ = keys
    digest = b"\x09" * 32
    assert not verify(digest, sign_hash(digest, priv1), pub2)


@pytest.mark.parametrize("pubkey", [
    b"",
    b"\x02" + b"\xff" * 32,          # x beyond field prime
    b"\x05" + b"\x11" * 32,          # unknown prefix
    b"\x04" + b"\x01" * 64,          # point not on curve
    b"\x02" * 10,
    "not bytes",
])
def test_malformed_pubkey_returns_false(pubkey):
    assert verify(KAT_DIGEST, KAT_SIG, pubkey) is False


@pytest.mark.parametrize("r,s", [
    (0, 2),
    (GX, 0),
    (N, 2),
    (GX, N + 1),
    ((1 << 256) - 1, (1 << 256) - 2),
])
def test_out_of_range_r_s_returns_false(r, s):
    assert verify(KAT_DIGEST, Signature(pack_int(r), pack_int(s)), KAT_PUBKEY) is False


def test_odd_s_is_rejected_without_raising():
    odd = Signature.from_ints(KAT_SIG.r_int, N - KAT_SIG.s_int)
    assert not odd.is_canonical
    assert verify(KAT_DIGEST, odd, KAT_PUBKEY) is False


def test_odd_s_is_fatal_in_strict_mode(monkeypatch):
    monkeypatch.setattr(CFG, "STRICT_CANONICAL_ASSERT", True)
    odd = Signature.from_ints(KAT_SIG.r_int, N - KAT_SIG.s_int)
    with pytest.raises(SignatureInvariantError):
        verify(KAT_DIGEST, odd, KAT_PUBKEY)
    assert verify(KAT_DIGEST, KAT_SIG, KAT_PUBKEY)


# -----------------------------
# 2-of-2
# -----------------------------

def _sign_both(tx, funding_output, keys, index=0):
    (priv1, _), (priv2, _), _ = keys
    spk = funding_output.script_pubkey
    return sign_input(tx, index, spk, priv1), sign_input(tx, index, spk, priv2)


def test_2of2_accepts_both_valid(tx, keys, funding_output):
    (_, pub1), (_, pub2), _ = keys
    sig1, sig2 = _sign_both(tx, funding_output, keys)
    assert verify_2of2(tx, 0, funding_output, pub1, pub2, sig1, sig2)
    assert tx.has_blank_scripts()


def test_2of2_uses_spent_script_as_subscript(tx, keys, funding_output):
    (_, pub1), (_, pub2), _ = keys
    sig1, sig2 = _sign_both(tx, funding_output, keys)
    digest = compute_input_digest(tx, 0, funding_output.script_pubkey)
    assert verify(digest, sig1, pub1) and verify(digest, sig2, pub2)


def test_2of2_rejects_swapped_keys(tx, keys, funding_output):
    (_, pub1), (_, pub2), _ = keys
    sig1, sig2 = _sign_both(tx, funding_output, keys)
    assert not verify_2of2(tx, 0, funding_output, pub2, pub1, sig1, sig2)


@pytest.mark.parametrize("which", [1, 2])
def test_2of2_rejects_garbage_signature(tx, keys, funding_output, which):
    (_, pub1), (_, pub2), _ = keys
    sig1, sig2 = _sign_both(tx, funding_output, keys)
    garbage = Signature(b"\x5a" * 32, b"\x5a" * 32)
    if which == 1:
        sig1 = garbage
    else:
        sig2 = garbage
    assert not verify_2of2(tx, 0, funding_output, pub1, pub2, sig1, sig2)


def test_2of2_rejects_signature_for_other_input(tx, keys, funding_output):
    (_, pub1), (_, pub2), _ = keys
    sig1, _ = _sign_both(tx, funding_output, keys, index=0)
    _, sig2_other = _sign_both(tx, funding_output, keys, index=1)
    assert not verify_2of2(tx, 0, funding_output, pub1, pub2, sig1, sig2_other)


def test_2of2_checks_only_the_keys_given(tx, keys, funding_output):
    (_, pub1), _, (priv3, pub3) = keys
    spk = funding_output.script_pubkey
    sig1 = sign_input(tx, 0, spk, keys[0][0])
    sig3 = sign_input(tx, 0, spk, priv3)
    assert verify_2of2(tx, 0, funding_output, pub1, pub3, sig1, sig3)
    assert not verify_2of2(tx, 0, funding_output, pub1, keys[1][1], sig1, sig3)


def test_2of2_requires_p2sh_output(tx, keys):
    (_, pub1), (_, pub2), _ = keys
    not_p2sh = TxOut(amount=1, script_pubkey=Script([0x51]))
    sig = KAT_SIG
    with pytest.raises(SignatureInvariantError):
        verify_2of2(tx, 0, not_p2sh, pub1, pub2, sig, sig)


def test_missing_signature_returns_false(tx, keys, funding_output):
    (priv1, pub1), (_, pub2), _ = keys
    assert verify(KAT_DIGEST, None, KAT_PUBKEY) is False
    assert verify(KAT_DIGEST, KAT_SIG.to_bytes(), KAT_PUBKEY) is False
    sig1 = sign_input(tx, 0, funding_output.script_pubkey, priv1)
    assert verify_2of2(tx, 0, funding_output, pub1, pub2, sig1, None) is False
