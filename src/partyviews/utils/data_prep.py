"""Data preparation for export."""

import datetime
import json
from typing import Any, Dict, Union

from ..core.constants import FileConstants
from ..core.models import Aggregate, NoData, Snapshot


def prepare_export(result: Union[Aggregate, NoData, Snapshot], kind: str = None) -> Dict[str, Any]:
    """Wrap a snapshot or aggregate result in an export envelope."""
    if kind is None:
        kind = "snapshot" if isinstance(result, Snapshot) else "aggregate"

    return {
        "kind": kind,
        "data": result.to_dict(),
        "metadata": {
            "export_timestamp": None,  # Will be set by caller
            "version": FileConstants.EXPORT_VERSION,
        },
    }


def export_to_json(data: Dict[str, Any], filename: str) -> None:
    """Export data to JSON file."""
    data["metadata"]["export_timestamp"] = datetime.datetime.now().isoformat()

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
