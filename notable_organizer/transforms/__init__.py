"""Text and path transforms used when placing notes."""
