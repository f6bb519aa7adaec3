"""Runner configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

WARN_MASKED_AFTER_ENV_VAR = "SPEKT_WARN_MASKED_AFTER"
LOG_PHASE_TIMINGS_ENV_VAR = "SPEKT_LOG_PHASE_TIMINGS"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def parse_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean flag from the environment.

    Unset or empty variables yield ``default``. Accepted values are
    ``1/true/yes/on`` and ``0/false/no/off``, case-insensitive.

    Args:
        name: Environment variable name
        default: Value when the variable is unset or empty

    Returns:
        Parsed boolean

    Raises:
        ValueError: If the variable holds an unrecognized value
    """
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")


@dataclass(frozen=True)
class RunnerConfig:
    """Configuration for how a Runner logs an invocation.

    None of these settings change the verdict or the reported message.

    Attributes:
        warn_masked_after_errors: Log an ``after`` failure discarded because
            the test body also failed at WARNING instead of DEBUG. Test
            runners print WARNING records next to the failure, so leave
            this off to keep the discarded error out of the report
        log_phase_timings: Log each phase's duration at DEBUG level
    """

    warn_masked_after_errors: bool = False
    log_phase_timings: bool = False

    @classmethod
    def from_env(cls) -> RunnerConfig:
        """Create config from environment variables."""
        return cls(
            warn_masked_after_errors=parse_bool_env(WARN_MASKED_AFTER_ENV_VAR, False),
            log_phase_timings=parse_bool_env(LOG_PHASE_TIMINGS_ENV_VAR, False),
        )
