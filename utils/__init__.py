"""IDs, timestamps and crash handling."""
