"""
DBLOG - serve the records of a SQLite log database as formatted text lines
"""
