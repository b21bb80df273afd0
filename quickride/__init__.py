"""Quick Ride shareholder registry."""
