"""kvlock: non-blocking distributed locks over a shared key-value store (Redis)."""
