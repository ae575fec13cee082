"""
Database models for the SQL record store.

Visit history lives in its own table so appends never rewrite the link row.
"""

from .short_link import ShortLink, Visit

__all__ = ["ShortLink", "Visit"]
