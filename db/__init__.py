"""
db/ - Database Layer
====================
PostgreSQL connection pool and schema creation.
This layer is the lowest in the architecture and depends only on config and logging.
"""
