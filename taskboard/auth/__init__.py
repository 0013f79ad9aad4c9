"""Actor resolution for taskboard."""
