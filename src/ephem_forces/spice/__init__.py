"""SPICE-backed minor-body (asteroid) kernel access."""
