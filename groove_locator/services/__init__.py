"""Services for groove-locator."""
