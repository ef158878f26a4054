"""Command-line client for a Wi-Fi router's HTTP management API."""

__version__ = "0.1.0"
