"""Mini README: Presentation preferences stored beside the ledger.

Structure:
    * DEFAULT_PREFERENCES - values used until an operator saves their own.
    * PreferenceStore - JSON file backed key-value store.

Preferences (header title, site icon, logo URL) belong to the presentation
layer. The ledger components never read them; only the web interface does.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Mapping

from .errors import StorageError, ValidationError
from .logging_utils import get_logger

LOGGER = get_logger(__name__)

DEFAULT_PREFERENCES: Dict[str, str] = {
    "headerTitle": "SHJ DATABASE",
    "siteIcon": "",
    "logoUrl": "",
}


class PreferenceStore:
    """Persist presentation preferences as a small JSON document."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Dict[str, str]:
        """Return defaults overlaid with any saved values."""

        preferences = dict(DEFAULT_PREFERENCES)
        if not self.path.exists():
            return preferences
        try:
            saved = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise StorageError(f"Preferences file is unreadable: {error}") from error
        if isinstance(saved, dict):
            preferences.update(
                {key: str(value) for key, value in saved.items() if key in DEFAULT_PREFERENCES}
            )
        return preferences

    def update(self, changes: Mapping[str, object]) -> Dict[str, str]:
        """Merge known keys into the saved preferences and persist them."""

        unknown = sorted(set(changes) - set(DEFAULT_PREFERENCES))
        if unknown:
            raise ValidationError(f"Unsupported preferences: {', '.join(unknown)}")
        preferences = self.load()
        preferences.update({key: str(value) for key, value in changes.items() if value is not None})
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(preferences, indent=2), encoding="utf-8")
        except OSError as error:
            raise StorageError(f"Could not save preferences: {error}") from error
        LOGGER.info("Saved preferences: %s", ", ".join(sorted(changes)))
        return preferences


__all__ = ["DEFAULT_PREFERENCES", "PreferenceStore"]
