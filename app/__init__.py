"""Deal Clarity workflow automation service."""
