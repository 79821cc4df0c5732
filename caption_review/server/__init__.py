"""HTTP API for the caption review formatter."""
