"""School Timeline: a shared photo feed API."""
