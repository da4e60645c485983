"""Posts and shares."""
