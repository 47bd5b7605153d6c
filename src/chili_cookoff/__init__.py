"""Chili cook-off voting service."""

__version__ = "0.1.0"
