"""Raw station detection events."""
