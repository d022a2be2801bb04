"""Marker for optional fields that were not provided at all."""


class _Unset:
    """Singleton meaning "field not provided", distinct from None or ""."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return 'UNSET'

    def __reduce__(self):
        return (_Unset, ())


UNSET = _Unset()


def is_set(value) -> bool:
    """True when the field was provided, even if provided as None or empty."""
    return value is not UNSET
