"""HTTP API: routes, schemas, and middleware."""
