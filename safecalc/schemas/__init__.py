"""Token and error types shared across the evaluator."""
