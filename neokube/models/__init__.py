"""Data models for neokube."""
