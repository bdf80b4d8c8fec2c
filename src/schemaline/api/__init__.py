"""REST API for schemaline."""
