"""HTTP API for the chili cook-off service."""
