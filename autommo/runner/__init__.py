"""Worker loop, metrics and the HTTP control surface."""
