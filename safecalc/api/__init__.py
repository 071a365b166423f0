"""HTTP API for the evaluator."""
