"""
Data models for the prescriber map.
"""

from .prescriber import Address, Prescriber, PrescriberDataset, name_sort_key, utc_timestamp

__all__ = [
    "Address",
    "Prescriber",
    "PrescriberDataset",
    "name_sort_key",
    "utc_timestamp",
]
