"""CLI for evaluating tree node filters."""
