"""Follow graph."""
