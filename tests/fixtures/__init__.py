from .marketplace_fixtures import (
    silk_blouse_order,
    empty_order,
    make_settings,
    eventually,
    FlakyBackend,
    LaggyBackend,
)

__all__ = [
    "silk_blouse_order",
    "empty_order",
    "make_settings",
    "eventually",
    "FlakyBackend",
    "LaggyBackend",
]
