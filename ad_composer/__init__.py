"""Text-to-image ad compositor."""
