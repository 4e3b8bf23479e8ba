class RitualError(Exception):
    pass


class StorageError(RitualError):
    """A storage slot exists but could not be read back."""


class SchemaError(StorageError):
    """Decoded data does not have the habit/log shape."""
