"""Agent-facing tools built on the evaluator."""
