class NudgeError(Exception):
    pass


class StoreError(NudgeError):
    """The backing SQLite engine failed; the enclosing transaction was rolled back."""


class SchemaDriftError(NudgeError):
    """The migration ledger on disk does not match the migrations this build knows."""


class ValidationError(NudgeError, ValueError):
    """Caller input was rejected before the store was touched."""
