"""
Environment validation utilities.

Fails fast on a misconfigured store URL or key policy while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import os
from urllib.parse import urlparse

from dautracker.core.config import settings

ALLOWED_REDIS_SCHEMES = ("redis", "rediss", "unix")


class EnvValidationError(RuntimeError):
    """Raised when environment validation fails."""


def _is_valid_redis_url(url: str) -> bool:
    parsed = urlparse(url)
    if parsed.scheme not in ALLOWED_REDIS_SCHEMES:
        return False
    if parsed.scheme == "unix":
        return bool(parsed.path)
    return bool(parsed.netloc)


def validate_env(settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        settings_obj: Override settings object (defaults to dautracker.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        EnvValidationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    redis_url = getattr(cfg, "REDIS_URL", None)

    if not redis_url or not _is_valid_redis_url(redis_url):
        raise EnvValidationError("REDIS_URL must be a redis://, rediss:// or unix:// URL")

    if not getattr(cfg, "DAU_KEY_PREFIX", None):
        raise EnvValidationError("DAU_KEY_PREFIX must not be empty")

    expire_days = getattr(cfg, "DAU_EXPIRE_DAYS", 0)
    if not isinstance(expire_days, int) or expire_days <= 0:
        raise EnvValidationError("DAU_EXPIRE_DAYS must be a positive integer")

    return True
