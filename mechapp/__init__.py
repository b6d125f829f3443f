"""MechApp client library: visit availability, form validation and API access."""

__version__ = "0.1.0"
