"""EventHub booking API."""
