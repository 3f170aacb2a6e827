"""Runtime settings for the build runner.

Read from environment variables at startup; command-line flags override them.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from .build.controller import DEFAULT_TICK_INTERVAL
from .build.state import TriggerPolicy

logger = logging.getLogger(__name__)


@dataclass
class BuildSettings:
    """Settings shared by the controller and the server."""

    project_paths: list[str] = field(default_factory=list)
    """Project directories searched for build configuration."""

    trigger_policy: TriggerPolicy = TriggerPolicy.IGNORE
    """What a trigger does while a build is running."""

    tick_interval: float = DEFAULT_TICK_INTERVAL
    """Seconds between elapsed-time ticks."""

    home_dir: str | None = None
    """Fallback configuration directory (user home when unset)."""

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> BuildSettings:
        """Build settings from BUILD_RUNNER_* environment variables."""
        env = os.environ if environ is None else environ
        settings = cls()

        policy = env.get("BUILD_RUNNER_TRIGGER_POLICY")
        if policy:
            try:
                settings.trigger_policy = TriggerPolicy(policy.strip().lower())
            except ValueError:
                logger.warning(f"Unknown BUILD_RUNNER_TRIGGER_POLICY '{policy}', using ignore")

        interval = env.get("BUILD_RUNNER_TICK_INTERVAL")
        if interval:
            try:
                value = float(interval)
                if value <= 0:
                    raise ValueError(interval)
                settings.tick_interval = value
            except ValueError:
                logger.warning(
                    f"Invalid BUILD_RUNNER_TICK_INTERVAL '{interval}', "
                    f"using {DEFAULT_TICK_INTERVAL}"
                )

        settings.home_dir = env.get("BUILD_RUNNER_HOME") or None
        return settings
