"""Estate CRM - prospect management backend for real-estate agents and operators."""

__version__ = "1.0.0"
