"""HTTP API for plant identification."""
