"""Exceptions raised by the recommendation core."""


class TableLoadError(RuntimeError):
    """The company table could not be loaded into any records.

    Fatal for a ranking request: callers must not present an empty ranking
    as if it were a real result.
    """


class InvalidPreferenceError(ValueError):
    """The user preference cannot be scored (e.g. no goals selected)."""
