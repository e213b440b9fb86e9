"""Pure domain rules (no persistence, no HTTP)."""
