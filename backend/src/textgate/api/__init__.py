"""HTTP API for the text analytics engine."""
