"""GarmentFlow HTTP API."""
