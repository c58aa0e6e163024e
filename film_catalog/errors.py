"""
Error types raised by the Film Catalog.
Store failures are not wrapped: SQLAlchemy errors reach the caller unchanged.
"""

from sqlalchemy.exc import SQLAlchemyError

# Alias so callers can catch store failures without importing SQLAlchemy
StoreError = SQLAlchemyError


class CatalogError(Exception):
	"""Base class for failures raised by the catalog itself."""


class NotFoundError(CatalogError):
	"""A referenced film, user, director or rating does not exist."""

	def __init__(self, kind: str, identity):
		self.kind = kind  # entity kind, e.g. "film"
		self.identity = identity  # the id that failed to resolve
		super().__init__(f"{kind} with id={identity} not found")


class ValidationError(CatalogError):
	"""Film fields or query arguments violate the validation contract."""
