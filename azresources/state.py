"""JSON state file for resources managed through the CLI.

Layout::

    {"version": 1, "resources": {"<type>.<name>": {"id": "...", "attributes": {...}}}}

The file is rewritten in full on every save; there is no locking.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from azresources.exceptions import ProviderError

logger = logging.getLogger(__name__)

STATE_VERSION = 1


class StateFileError(ProviderError):
    """Raised when a state file is unreadable or has an unsupported layout."""

    pass


def empty_state() -> Dict[str, Any]:
    return {"version": STATE_VERSION, "resources": {}}


def load_state(path: str) -> Dict[str, Any]:
    """Load a state document, returning an empty one if the file is missing."""
    if not os.path.exists(path):
        logger.debug(f"State file {path} does not exist, starting empty")
        return empty_state()
    try:
        with open(path, "r") as f:
            doc = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StateFileError(f"Could not read state file {path}: {e}") from e

    if not isinstance(doc, dict) or doc.get("version") != STATE_VERSION:
        raise StateFileError(
            f"Unsupported state file format in {path}",
            context={"version": doc.get("version") if isinstance(doc, dict) else None},
        )
    doc.setdefault("resources", {})
    return doc


def save_state(path: str, doc: Dict[str, Any]) -> None:
    """Write the state document, replacing the file only after a full write."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".state-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(doc, f, indent=4, sort_keys=True)
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise
    logger.debug(f"Wrote {len(doc.get('resources', {}))} resource(s) to {path}")


def get_resource(doc: Dict[str, Any], address: str) -> Optional[Dict[str, Any]]:
    """Return the flat state (attributes plus ``id``) of an address, if any."""
    entry = doc["resources"].get(address)
    if entry is None:
        return None
    return {**entry.get("attributes", {}), "id": entry.get("id", "")}


def put_resource(doc: Dict[str, Any], address: str, state: Dict[str, Any]) -> None:
    """Store a flat state; an empty ``id`` removes the address."""
    if not state.get("id"):
        remove_resource(doc, address)
        return
    attributes = {k: v for k, v in state.items() if k != "id"}
    doc["resources"][address] = {"id": state["id"], "attributes": attributes}


def remove_resource(doc: Dict[str, Any], address: str) -> None:
    doc["resources"].pop(address, None)
