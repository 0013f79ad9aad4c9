"""External service integrations for taskboard."""
