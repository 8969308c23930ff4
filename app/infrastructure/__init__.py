"""Infrastructure: persistence, external services, security."""
