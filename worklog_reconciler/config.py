from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from decimal import Decimal
from pathlib import Path
from typing import Any

from worklog_reconciler.utils.contracts import validate_output

logger = logging.getLogger(__name__)

DECIMAL_FIELDS = ("translation_rate", "check_rate", "surcharge")


@dataclass(frozen=True)
class ReconcilerConfig:
    """Agency-specific constants used while normalizing, checking and totalling."""

    translation_rate: Decimal = Decimal("18")
    check_rate: Decimal = Decimal("1.4")
    surcharge: Decimal = Decimal("81.16")
    placeholder_case: str = "ALP-"
    translation_label: str = "翻訳"
    check_label: str = "英文チェック"
    lookahead_days: int = 7
    periods_per_year: int = 12


DEFAULT_CONFIG = ReconcilerConfig()


def config_from_dict(payload: dict[str, Any], base: ReconcilerConfig = DEFAULT_CONFIG) -> ReconcilerConfig:
    known = {f.name for f in fields(ReconcilerConfig)}
    overrides: dict[str, Any] = {}
    for key, value in payload.items():
        if key == "schema_version":
            continue
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        if key in DECIMAL_FIELDS:
            # str() first so 1.4 stays 1.4 and does not pick up float noise
            value = Decimal(str(value))
        overrides[key] = value
    return replace(base, **overrides)


def load_config(path: Path) -> ReconcilerConfig:
    """
    Load a JSON config file and overlay it on the defaults.

    Raises:
        FileNotFoundError: If the file does not exist.
        ContractError: If the payload violates the reconciler_config schema.
    """
    with path.open("r", encoding="utf-8") as handle:
        payload: dict[str, Any] = json.load(handle)

    validate_output(payload, "reconciler_config", mode="FILING")
    return config_from_dict(payload)
