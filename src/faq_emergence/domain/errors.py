"""
Domain Errors

Exception taxonomy shared across the layers.
"""


class ValidationError(ValueError):
    """The request prompt is malformed or out of range"""
    pass


class GenerationError(Exception):
    """The generation service failed to produce a usable FAQ"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class StoreError(Exception):
    """Parameter store failure"""
    pass


class StoreReadError(StoreError):
    """Reading a learned configuration failed"""
    pass


class StoreWriteError(StoreError):
    """Persisting a learned configuration failed"""
    pass
