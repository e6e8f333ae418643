"""HTTP interface of the Media Re-encoder (Flask)."""
