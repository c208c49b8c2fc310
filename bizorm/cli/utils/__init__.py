"""bizorm CLI utilities."""
