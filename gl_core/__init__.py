"""General ledger posting core."""
