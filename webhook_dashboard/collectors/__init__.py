"""Data collectors."""
