"""Data models for groove-locator."""
