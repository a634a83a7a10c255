"""HTTP surface for knowledge ingestion."""
