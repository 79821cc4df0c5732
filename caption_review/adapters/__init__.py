"""Adapters between host capabilities and the format_lines library."""
