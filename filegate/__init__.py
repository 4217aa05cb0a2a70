"""
FileGate

Quota-enforced file storage with signed temporary download links.
"""

__version__ = "1.0.0"
