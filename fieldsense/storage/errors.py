class StorageError(Exception):
    """A key-value backend failed to read or write.

    The previous persisted state is left untouched when a write fails.
    """
