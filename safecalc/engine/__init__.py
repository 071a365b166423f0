"""Evaluation core: tokenizer, recursive-descent parser, public entry point.

The core is pure. It does not log, read configuration, or keep state
between calls; callers pass limits explicitly.
"""
