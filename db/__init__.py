"""
Database table shapes and demo-data seeding.

Runtime DB access lives in the services. This package is for repo-level DB operations:
- Table definitions the seeders write against
- Priority-ordered seed units (`python -m db.seeds`)
"""
