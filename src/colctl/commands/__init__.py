"""Command layer — registry of remote commands and the line translator."""
