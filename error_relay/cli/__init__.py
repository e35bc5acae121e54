"""
Command-line interface for error-relay.
"""
