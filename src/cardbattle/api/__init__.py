"""HTTP transport for the card battle engine."""
