"""HTTP API for the record-keeping screens."""
