import os
import time
import threading
import yaml
from pathlib import Path
from contextlib import contextmanager
from typing import Dict

from loguru import logger

DEFAULT_CONFIG_PATH = Path("configs/rate_limits.yaml")
DEFAULT_LIMIT = {"rate_per_sec": 2, "burst": 4}


class TokenBucketLimiter:
    """Blocks the caller until a token is available, refilling at `rate` per second."""

    def __init__(self, rate_per_sec: float, burst: int):
        if rate_per_sec <= 0 or burst < 1:
            raise ValueError(f"invalid limiter settings: rate_per_sec={rate_per_sec}, burst={burst}")
        self.rate = rate_per_sec
        self.capacity = burst
        self.tokens = float(burst)
        self.lock = threading.Lock()
        self.last = time.monotonic()

    @contextmanager
    def __call__(self):
        with self.lock:
            now = time.monotonic()
            self.tokens = min(self.capacity, self.tokens + (now - self.last) * self.rate)
            self.last = now
            if self.tokens < 1:
                wait = (1 - self.tokens) / self.rate
                logger.debug(f"rate limit reached, waiting {wait:.3f}s")
                time.sleep(wait)
                self.tokens = 1
                self.last = time.monotonic()
            self.tokens -= 1
        yield


def _config_path() -> Path:
    return Path(os.getenv("RATE_LIMITS_PATH") or DEFAULT_CONFIG_PATH)


def _load_config() -> Dict[str, dict]:
    p = _config_path()
    if not p.exists():
        return {}
    return yaml.safe_load(p.read_text()) or {}


_limiters: Dict[str, TokenBucketLimiter] = {}
_limiters_lock = threading.Lock()


def get_limiter(channel: str) -> TokenBucketLimiter:
    cfg = {**DEFAULT_LIMIT, **(_load_config().get(channel) or {})}
    key = f"{channel}:{cfg['rate_per_sec']}:{cfg['burst']}"
    with _limiters_lock:
        if key not in _limiters:
            _limiters[key] = TokenBucketLimiter(float(cfg["rate_per_sec"]), int(cfg["burst"]))
        return _limiters[key]
