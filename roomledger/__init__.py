"""Room, tenant, rent, mess and deposit record keeping for a small rental property."""

__version__ = "0.1.0"
