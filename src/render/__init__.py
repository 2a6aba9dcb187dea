"""Chart image rendering for dashboard series."""
