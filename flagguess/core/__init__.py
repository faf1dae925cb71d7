"""Cross-cutting concerns: errors, logging, rate limiting."""
