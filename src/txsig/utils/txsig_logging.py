# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of txsig - see LICENSE
# Refs: Python logging cookbook
'''
HOW TO USE logging in your code:

log = get_ctx_logger("txsig.signing.signer")
log.trace("very technical details, like digests and preimage sizes")
log.debug("technical details for diagnosis, e.g. why a signature was rejected")
log.info("normal event / milestone")
log.warning("a non-fatal condition that needs attention")
log.error("handled error")
log.exception("context message when an exception occurs") >automatically include traceback

Library modules only ask for loggers. Applications call setup_logging() once.
'''

from __future__ import annotations

import os, logging, re, json, time, hashlib
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

from txsig.utils import config as CFG

# ===== TRACE level (below DEBUG) =====
TRACE = 9
logging.addLevelName(TRACE, "TRACE")
def _trace(self, msg, *a, **k):
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, a, **k)
logging.Logger.trace = _trace

# Context keys carried by ContextAdapter and rendered by the formatters
CONTEXT_KEYS = ("txid", "input")


# =========================
# 1) Core logging setup
# =========================

if CFG.LOG_SHOW_PROCESS:
    _DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(processName)s %(name)s: %(message)s"
else:
    _DEFAULT_FMT = f"%(asctime)s [%(levelname)s] {CFG.LOG_PROC_PLACEHOLDER} %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class RedactFilter(logging.Filter):
    RE_PRIV_HEX = re.compile(r"\b(priv\w*\s*[=:]\s*)[0-9a-fA-F]{64}\b")
    RE_WIF      = re.compile(r"\b[5KL][1-9A-HJ-NP-Za-km-z]{50,51}\b")
    def filter(self, record):
        msg = record.getMessage()
        msg = self.RE_PRIV_HEX.sub(r"\1[REDACTED_PRIVKEY]", msg)
        msg = self.RE_WIF.sub("[REDACTED_WIF]", msg)
        record.msg, record.args = msg, None
        return True

class RateLimitFilter(logging.Filter):
    def __init__(self, min_interval: float = 2.0, max_keys: int = 1024):
        super().__init__()
        self.min_interval = float(min_interval)
        self.max_keys = int(max_keys)
        self._last: dict[str, float] = {}
    def _prune(self, now: float):
        # keys past the interval would pass anyway
        self._last = {k: t for k, t in self._last.items() if (now - t) < self.min_interval}
        while self._last and len(self._last) >= self.max_keys:
            self._last.pop(min(self._last, key=self._last.get))
    def filter(self, record):
        base = f"{record.name}|{record.levelno}|{record.msg}"
        key = hashlib.blake2b(base.encode(), digest_size=8).hexdigest()
        now = time.monotonic()
        last = self._last.get(key)
        if last is not None and (now - last) < self.min_interval:
            return False
        if len(self._last) >= self.max_keys:
            self._prune(now)
        self._last[key] = now
        return True

class JsonFormatter(logging.Formatter):
    def format(self, record):
        d = {
            "ts": self.formatTime(record, _DEFAULT_DATEFMT),
            "lvl": record.levelname,
            "logger": record.name,
            "proc": (record.processName if CFG.LOG_SHOW_PROCESS else CFG.LOG_PROC_PLACEHOLDER),
            "msg": record.getMessage(),
        }
        for k in CONTEXT_KEYS:
            v = getattr(record, k, None)
            if v not in (None, "-"):
                d[k] = v
        if record.exc_info:
            d["exc"] = self.formatException(record.exc_info)
        return json.dumps(d, ensure_ascii=False)

class SafeFormatter(logging.Formatter):
    def format(self, record):
        for k in CONTEXT_KEYS:
            if not hasattr(record, k):
                setattr(record, k, "-")
        return super().format(record)

class ContextAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        for k in CONTEXT_KEYS:
            extra.setdefault(k, self.extra.get(k, "-"))
        return msg, kwargs

    def isEnabledFor(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def trace(self, msg, *args, **kwargs):
        if self.logger.isEnabledFor(TRACE):
            self.log(TRACE, msg, *args, **kwargs)


def get_ctx_logger(name: str = "txsig", **ctx) -> ContextAdapter:
    return ContextAdapter(get_logger(name), ctx)

def setup_logging(
    log_file: str | os.PathLike | None = None,
    level: int | str | None = None,
    to_console: bool | None = None,
    rotate_max_bytes: int | None = None,
    backup_count: int | None = None,
    force: bool = False,
    fmt: str = _DEFAULT_FMT,
    datefmt: str = _DEFAULT_DATEFMT,) -> logging.Logger:

    if level is None:
        level = CFG.LOG_LEVEL
    if log_file is None:
        log_file = CFG.LOG_PATH

    # Get preference from CFG when argument is None
    if to_console is None:
        to_console = bool(getattr(CFG, "LOG_TO_CONSOLE", True))
    if rotate_max_bytes is None:
        rotate_max_bytes = int(getattr(CFG, "LOG_ROTATE_MAX_BYTES", 5_000_000))
    if backup_count is None:
        backup_count = int(getattr(CFG, "LOG_BACKUP_COUNT", 3))

    log_path = Path(log_file)
    if log_path.parent and not log_path.parent.exists():
        log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = []
    as_json = str(CFG.LOG_FORMAT).lower() == "json"
    rate_seconds_console = float(getattr(CFG, "LOG_RATE_LIMIT_SECONDS", 0.0))
    rate_seconds_file    = float(getattr(CFG, "LOG_FILE_RATE_LIMIT_SECONDS", 0.0))

    # --- File handler ---
    fh = RotatingFileHandler(
        log_path, maxBytes=int(rotate_max_bytes), backupCount=int(backup_count),
        encoding="utf-8", delay=True
    )
    fh.setFormatter(JsonFormatter() if as_json else SafeFormatter(fmt, datefmt))
    fh.addFilter(RedactFilter())
    if rate_seconds_file > 0.0:
        fh.addFilter(RateLimitFilter(rate_seconds_file))
    handlers.append(fh)

    # --- Console handler (optional) ---
    if to_console:
        sh = logging.StreamHandler()
        sh.setFormatter(JsonFormatter() if as_json else SafeFormatter(fmt, datefmt))
        sh.addFilter(RedactFilter())
        if rate_seconds_console > 0.0:
            sh.addFilter(RateLimitFilter(rate_seconds_console))
        handlers.append(sh)

    # Level
    lvl = level
    if isinstance(lvl, str):
        lvl = logging.getLevelName(lvl.upper())
        if not isinstance(lvl, int):
            raise ValueError(f"unknown log level: {level!r}")

    logging.basicConfig(level=lvl, handlers=handlers, force=force)
    logging.getLogger("txsig").trace(
        "Logging configured: level=%s file=%s format=%s console=%s rotate=%s backup=%s",
        logging.getLevelName(lvl), str(log_path), ("json" if as_json else "plain"),
        to_console, rotate_max_bytes, backup_count
    )
    return logging.getLogger("txsig")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    base = "txsig" if not name else name
    return logging.getLogger(base)
