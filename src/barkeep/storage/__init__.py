"""Storage module for Barkeep persistence.

Provides JSON storage for:
- Exported/imported character files (the whole application state)
- The local state file reloaded at start-up
"""

from barkeep.storage.persistence import (
    PERSISTED_KEYS,
    StateStore,
    export_filename,
    export_state,
    import_state,
    load_from_file,
    save_to_file,
)

__all__ = [
    "PERSISTED_KEYS",
    "StateStore",
    "export_filename",
    "export_state",
    "import_state",
    "load_from_file",
    "save_to_file",
]
