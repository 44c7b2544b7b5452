"""Mobile push delivery."""
