"""REST API for observing and controlling a running colony."""
