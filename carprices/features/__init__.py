"""Feature pipeline construction."""
