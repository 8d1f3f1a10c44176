# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: BIP62-LowS; SIGHASH_ALL

'''
=============================================================================
 -------- !!! CONSENSUS-CRITICAL REMINDER - READ BEFORE EDITING !!! --------
=============================================================================

The values below **MUST BE IDENTICAL** across all peers.
Changing them changes which digests and signatures other validators accept.

  1) SIGHASH
   - SIGHASH_ALL, DEFAULT_SEQUENCE

  2) SIGNATURE LAYOUT
   - SIGNATURE_FIELD_BYTES, WIRE_FIELD_BYTES, WIRE_FIELDS_PER_VALUE

NOT CONSENSUS (safety differs between peers):
   nonce mode, canonicity assertion policy, logging/path.

=============================================================================
'''

import os
import appdirs


# =============================================================================
# 1. MODE & APPLICATION
# =============================================================================
# ---- RUNTIME PROFILE ----
MODE   = os.environ.get("TXSIG_MODE", "dev")  # "dev" or "prod"
IS_DEV = (MODE.lower() == "dev")  # cached boolean to simplify dev/prod toggles

# ---- APP METADATA ----
APP_NAME     = "txsig"  # name used for user data directories
APP_AUTHOR   = "TsarStudio"  # vendor string passed into platform dir helpers
APP_DATA_DIR = appdirs.user_data_dir(APP_NAME, APP_AUTHOR)  # OS-specific data folder resolved via appdirs


# =============================================================================
# 2. SIGHASH
# =============================================================================
SIGHASH_ALL      = 1  # only supported hash type, appended as LE32 to the preimage
DEFAULT_SEQUENCE = 0xFFFFFFFF  # sequence used when an input carries none


# =============================================================================
# 3. SIGNATURE LAYOUT
# =============================================================================
SIGNATURE_FIELD_BYTES = 32  # fixed width of r and s, big-endian, left-zero-padded
WIRE_FIELD_BYTES      = 8  # raw bytes carried by each wire field
WIRE_FIELDS_PER_VALUE = SIGNATURE_FIELD_BYTES // WIRE_FIELD_BYTES  # r1..r4 / s1..s4


# =============================================================================
# 4. SIGNING POLICY
# =============================================================================
SIGN_DETERMINISTIC      = True  # RFC6979 nonces; False falls back to random k
STRICT_CANONICAL_ASSERT = False  # True: odd-s input to verify() is a fatal error instead of False


# =============================================================================
# 5. LOGGING
# =============================================================================
# ---- BASE OUTPUT ----
LOG_DIR              = os.path.join(APP_DATA_DIR, "logging")  # folder holding rotated log files
LOG_PATH             = os.path.join(LOG_DIR, "txsig.log")  # canonical log file path before format-specific override
LOG_SHOW_PROCESS     = False  # include process metadata in log context when True
LOG_PROC_PLACEHOLDER = "-"  # value used when process info is hidden

# ---- MODE PROFILES ----
if IS_DEV:
    # ---- DEV PROFILE ----
    LOG_LEVEL                   = "TRACE"  # very verbose logging for development
    LOG_FORMAT                  = "plain"  # plain text logs ease local debugging
    LOG_TO_CONSOLE              = True  # mirror logs to stdout for dev loops
    LOG_RATE_LIMIT_SECONDS      = 0.0  # disable console throttling in dev
    LOG_FILE_RATE_LIMIT_SECONDS = 0.0  # disable file throttling in dev
    LOG_ROTATE_MAX_BYTES        = 5_000_000  # rollover log files after ~5MB in dev
    LOG_BACKUP_COUNT            = 3  # retain a few rotated dev log files
else:
    # ---- PROD PROFILE ----
    LOG_LEVEL                   = "INFO"  # balanced verbosity for production
    LOG_FORMAT                  = "json"  # JSON logs simplify ingestion in prod
    LOG_TO_CONSOLE              = False  # suppress console spam for daemons
    LOG_RATE_LIMIT_SECONDS      = 2.0  # throttle console spam in prod
    LOG_FILE_RATE_LIMIT_SECONDS = 1.0  # throttle file spam in prod
    LOG_ROTATE_MAX_BYTES        = 10_000_000  # rollover log files after ~10MB in prod
    LOG_BACKUP_COUNT            = 7  # keep more history in production

# ---- LOG PATH NORMALIZATION ----
if str(LOG_FORMAT).lower().strip() == "json":
    LOG_PATH = os.path.join(LOG_DIR, "txsig.jsonl")  # JSON lines extension to aid parsing
