"""Search over users and post content."""
