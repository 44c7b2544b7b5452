"""Cross-cutting helpers (logging, datetime, ID generation)."""
