"""Command line programs built on the terminal core."""
