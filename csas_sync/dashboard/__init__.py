"""Dashboard package for console output."""
