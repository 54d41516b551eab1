"""
Integration tests package.

Exercises the Flask app end to end through the test client against an
in-memory SQLite database, plus the management commands.
"""
