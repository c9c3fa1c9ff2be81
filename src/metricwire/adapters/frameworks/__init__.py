"""Web framework adapters for datagram ingestion."""
