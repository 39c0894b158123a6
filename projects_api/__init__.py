"""
Projects API package.

Provides a FastAPI application for managing projects, with interchangeable
persistence backends (in-memory, SQL via SQLAlchemy, or a PostgREST/Supabase
service) and thin proxies for text completion and stock-photo search.
"""
