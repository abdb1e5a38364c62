"""Device adapters (camera, speech)."""
