"""Request boundary between the wire format and the format_lines library."""
