"""Document store adapters and the dashboard SDK."""
