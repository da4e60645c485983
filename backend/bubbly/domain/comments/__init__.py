"""Comments on posts and shares."""
