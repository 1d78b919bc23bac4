"""Core pipeline — projection, query compilation and event routing."""
