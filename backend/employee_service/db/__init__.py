"""Database declarations: SQLAlchemy Base shared by all table models."""
