"""HTTP middleware for logging and metrics."""
