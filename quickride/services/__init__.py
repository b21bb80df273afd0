"""Business services for the shareholder registry."""
