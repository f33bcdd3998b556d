import json
import logging
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent.parent / "schemas"


class ContractError(Exception):
    """Raised when a config file or report payload violates its schema."""

    pass


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load one of the bundled schemas (``reconciler_config``, ``reconciliation_report``)."""
    schema_path = SCHEMA_DIR / f"{schema_name}.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    with open(schema_path, "r", encoding="utf-8") as f:
        return dict(json.load(f))


def _violation_path(error: ValidationError) -> str:
    # e.g. "counts.ledger_entries" or "checks.0.name"; "<root>" for top-level keys
    return ".".join(str(part) for part in error.absolute_path) or "<root>"


def validate_output(data: Dict[str, Any], schema_name: str, mode: str = "FILING") -> None:
    """
    Check a rate/label config file or a ``--json`` reconciliation report against its schema.

    The config loader uses FILING so a bad rates file stops the run before any
    workbook is read. REVIEW only logs, for callers that still want the output.

    Raises:
        ContractError: If validation fails and mode is FILING.
    """
    try:
        schema = load_schema(schema_name)
        jsonschema.validate(instance=data, schema=schema)
    except ValidationError as e:
        msg = f"Data Contract Violation ({schema_name}) at {_violation_path(e)}: {e.message}"
    except FileNotFoundError as e:
        msg = f"Data Contract Violation ({schema_name}): {e}"
    else:
        return

    if mode == "FILING":
        raise ContractError(msg)
    logger.warning(msg)
