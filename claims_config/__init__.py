"""
claims_config -- single public entrypoint for claim policy configuration.

``get_active_policy()`` is the only way the rest of the system obtains a
``ClaimPolicy`` from configuration.  The kernel never reads files; it is
handed the compiled policy.

Every successful load emits a ``policy_loaded`` log entry carrying the
policy name, version and checksum so a decision can be traced back to the
limits that governed it.
"""

from __future__ import annotations

from pathlib import Path

from claims_config.loader import (
    ClaimPolicyConfigError,
    compute_checksum,
    load_policy_file,
    parse_policy,
)
from claims_kernel.domain.policy import ClaimPolicy
from claims_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_POLICY_PATH = Path(__file__).parent / "policy.yaml"


def get_active_policy(path: Path | str | None = None) -> ClaimPolicy:
    """Load the claim policy.

    Args:
        path: Policy YAML to load.  Defaults to the packaged policy.yaml.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ClaimPolicyConfigError: If the document is not a valid policy.
    """
    policy_path = Path(path) if path is not None else DEFAULT_POLICY_PATH
    policy = load_policy_file(policy_path)

    _logger.info(
        "policy_loaded",
        extra={
            "policy_name": policy.name,
            "policy_version": policy.version,
            "checksum": policy.checksum,
            "path": str(policy_path),
        },
    )
    return policy


__all__ = [
    "ClaimPolicyConfigError",
    "DEFAULT_POLICY_PATH",
    "compute_checksum",
    "get_active_policy",
    "parse_policy",
]
