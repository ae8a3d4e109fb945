"""Data-access functions over a SQLAlchemy Session.

Repositories add, flush and delete but never commit; the calling service owns
the transaction.
"""
