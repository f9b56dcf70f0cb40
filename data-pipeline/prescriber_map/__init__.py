"""
Prescriber map: sync tagged CRM contacts into a geocoded dataset and search it.
"""

__version__ = "1.0.0"
