"""Reactions on posts and shares."""
