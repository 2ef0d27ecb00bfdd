"""trashctl - a safety net for rm.

Moves files into per-device trashcans instead of deleting them, keeps
every overwritten version, and restores them on demand.
"""

__version__ = "0.4.0"
