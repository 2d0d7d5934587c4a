"""Wireless status monitor for desktop status bars."""

__version__ = "0.1.0"
