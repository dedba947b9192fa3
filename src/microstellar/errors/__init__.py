"""Error taxonomy for py-microstellar."""
