"""HTTP surface for taskboard."""
