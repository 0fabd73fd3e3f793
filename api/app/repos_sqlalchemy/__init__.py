"""SQLAlchemy-backed repository implementations.

Repository helpers are plain async functions operating on an
``AsyncSession``. They perform database work only; authorization and status
validation happen in :mod:`api.app.domain` and :mod:`api.app.services`.
"""
