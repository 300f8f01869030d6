"""zpages: health, readiness and operational support endpoints for a service."""
