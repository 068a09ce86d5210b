"""Daily species counts: reconciliation, storage, aggregation and backfill."""
