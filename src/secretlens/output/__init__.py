"""Reporters — terminal, JSON and SARIF."""
