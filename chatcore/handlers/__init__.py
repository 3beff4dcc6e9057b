"""Connection admission, rate limiting, session fan-out and the per-connection protocol."""
