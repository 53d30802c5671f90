"""Adapters to collaborators outside the search core."""
