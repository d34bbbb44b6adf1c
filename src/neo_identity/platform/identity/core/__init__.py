"""Identity domain core."""
