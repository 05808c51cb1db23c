"""Feature packages, one per API resource."""
