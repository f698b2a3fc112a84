"""Analytics records and dashboard counters."""
