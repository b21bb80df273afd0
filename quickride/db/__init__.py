"""Database engine, sessions and transaction helpers."""
