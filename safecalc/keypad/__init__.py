"""Caller-owned keypad state for interactive front ends."""
