"""Display and console helpers for callers of the evaluator."""
