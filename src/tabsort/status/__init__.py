"""Toolbar badge and icon rendering."""
