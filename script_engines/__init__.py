"""Scene script engines."""
