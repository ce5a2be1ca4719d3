"""HTTP API for Campus Board."""
