"""Container network management API."""
