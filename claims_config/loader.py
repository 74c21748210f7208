"""
Policy loader (``claims_config.loader``).

Responsibility
--------------
Reads a claim policy YAML file and compiles it into a frozen
``ClaimPolicy``.  Callers go through ``claims_config.get_active_policy()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``name``/``version``, unknown keys, non-positive limits, a
  malformed extension list or more decimal places than storage keeps
  -> ``ClaimPolicyConfigError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from claims_kernel.domain.policy import STORAGE_DECIMAL_PLACES, ClaimPolicy

_SECTIONS: dict[str, frozenset[str]] = {
    "workload": frozenset({"submission_max", "coordinator_max", "decimal_places"}),
    "rates": frozenset({"max_hourly_rate", "decimal_places"}),
    "approval": frozenset({"final_max_amount", "enforce_separation_of_duties"}),
    "submission": frozenset({"max_period_length", "max_description_length"}),
    "documents": frozenset({"allowed_extensions", "max_size_bytes"}),
}


class ClaimPolicyConfigError(ValueError):
    """Policy file is structurally valid YAML but not a valid policy."""


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file and return its contents as a dict."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ClaimPolicyConfigError(f"{path}: top level must be a mapping")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _decimal(section: str, key: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ClaimPolicyConfigError(f"{section}.{key} must be a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ClaimPolicyConfigError(
            f"{section}.{key} must be a number, got {value!r}"
        ) from None
    if not result.is_finite() or result <= 0:
        raise ClaimPolicyConfigError(f"{section}.{key} must be positive, got {value!r}")
    return result


def _positive_int(section: str, key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ClaimPolicyConfigError(
            f"{section}.{key} must be a positive integer, got {value!r}"
        )
    return value


def _places(section: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ClaimPolicyConfigError(
            f"{section}.decimal_places must be a non-negative integer, got {value!r}"
        )
    return value


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ClaimPolicyConfigError(f"{name} must be a mapping")
    unknown = set(section) - _SECTIONS[name]
    if unknown:
        raise ClaimPolicyConfigError(
            f"{name}: unknown keys {', '.join(sorted(unknown))}"
        )
    return section


def parse_policy(data: dict[str, Any]) -> ClaimPolicy:
    """Compile a parsed policy document into a ``ClaimPolicy``.

    Omitted sections and keys keep the ``ClaimPolicy`` defaults; ``name``
    and ``version`` are required.
    """
    unknown = set(data) - set(_SECTIONS) - {"name", "version"}
    if unknown:
        raise ClaimPolicyConfigError(f"unknown top-level keys {', '.join(sorted(unknown))}")
    if not data.get("name"):
        raise ClaimPolicyConfigError("policy name is required")
    version = data.get("version")
    _positive_int("policy", "version", version)

    defaults = ClaimPolicy.default()
    fields: dict[str, Any] = {"name": str(data["name"]), "version": version}

    workload = _section(data, "workload")
    if "submission_max" in workload:
        fields["submission_max_workload"] = _decimal(
            "workload", "submission_max", workload["submission_max"],
        )
    if "coordinator_max" in workload:
        fields["coordinator_max_workload"] = _decimal(
            "workload", "coordinator_max", workload["coordinator_max"],
        )
    if "decimal_places" in workload:
        fields["workload_decimal_places"] = _places("workload", workload["decimal_places"])

    rates = _section(data, "rates")
    if "max_hourly_rate" in rates:
        fields["max_hourly_rate"] = _decimal(
            "rates", "max_hourly_rate", rates["max_hourly_rate"],
        )
    if "decimal_places" in rates:
        fields["rate_decimal_places"] = _places("rates", rates["decimal_places"])

    approval = _section(data, "approval")
    if "final_max_amount" in approval:
        fields["final_approval_max_amount"] = _decimal(
            "approval", "final_max_amount", approval["final_max_amount"],
        )
    if "enforce_separation_of_duties" in approval:
        flag = approval["enforce_separation_of_duties"]
        if not isinstance(flag, bool):
            raise ClaimPolicyConfigError(
                f"approval.enforce_separation_of_duties must be true or false, got {flag!r}"
            )
        fields["enforce_separation_of_duties"] = flag

    submission = _section(data, "submission")
    for key in ("max_period_length", "max_description_length"):
        if key in submission:
            fields[key] = _positive_int("submission", key, submission[key])

    documents = _section(data, "documents")
    if "allowed_extensions" in documents:
        extensions = documents["allowed_extensions"]
        if (
            not isinstance(extensions, list)
            or not extensions
            or not all(isinstance(e, str) and e.startswith(".") for e in extensions)
        ):
            raise ClaimPolicyConfigError(
                "documents.allowed_extensions must be a non-empty list like ['.pdf']"
            )
        fields["allowed_document_extensions"] = tuple(e.lower() for e in extensions)
    if "max_size_bytes" in documents:
        fields["max_document_size_bytes"] = _positive_int(
            "documents", "max_size_bytes", documents["max_size_bytes"],
        )

    submission_max = fields.get("submission_max_workload", defaults.submission_max_workload)
    coordinator_max = fields.get("coordinator_max_workload", defaults.coordinator_max_workload)
    if coordinator_max > submission_max:
        raise ClaimPolicyConfigError(
            f"workload.coordinator_max ({coordinator_max}) cannot exceed "
            f"workload.submission_max ({submission_max})"
        )

    workload_places = fields.get("workload_decimal_places", defaults.workload_decimal_places)
    rate_places = fields.get("rate_decimal_places", defaults.rate_decimal_places)
    if workload_places + rate_places > STORAGE_DECIMAL_PLACES:
        raise ClaimPolicyConfigError(
            f"workload.decimal_places + rates.decimal_places ({workload_places + rate_places}) "
            f"cannot exceed {STORAGE_DECIMAL_PLACES}, the scale amounts are stored at"
        )

    return ClaimPolicy(checksum=compute_checksum(data), **fields)


def load_policy_file(path: Path) -> ClaimPolicy:
    """Load and compile one policy file."""
    return parse_policy(load_yaml_file(path))
