"""Internal utilities for Liquor."""
