"""
Existence checks for catalog identities.
Turns a missing film or user into an explicit NotFoundError before a query runs.
"""

from sqlalchemy import exists, select
from sqlalchemy.engine import Engine

from loguru import logger

from .errors import NotFoundError
from .schema import directors, films, ratings, users


class ExistenceChecker:
	"""Answers "does this id denote a live record?" for each referenced table."""

	def __init__(self, engine: Engine):
		self.engine = engine

	def _exists(self, id_column, identity) -> bool:
		if identity is None:  # nothing can match a missing id
			return False
		with self.engine.connect() as conn:
			return bool(conn.execute(select(exists().where(id_column == identity))).scalar())

	def film_exists(self, film_id: int) -> bool:
		return self._exists(films.c.film_id, film_id)

	def user_exists(self, user_id: int) -> bool:
		return self._exists(users.c.user_id, user_id)

	def director_exists(self, director_id: int) -> bool:
		return self._exists(directors.c.director_id, director_id)

	def rating_exists(self, rating_id: int) -> bool:
		return self._exists(ratings.c.rating_id, rating_id)

	def check_film_exists(self, film_id: int):
		"""Raise NotFoundError unless the film exists."""
		if not self.film_exists(film_id):
			logger.warning(f"[Checker] Film {film_id} not found")
			raise NotFoundError('film', film_id)

	def check_user_exists(self, user_id: int):
		"""Raise NotFoundError unless the user exists."""
		if not self.user_exists(user_id):
			logger.warning(f"[Checker] User {user_id} not found")
			raise NotFoundError('user', user_id)

	def check_director_exists(self, director_id: int):
		"""Raise NotFoundError unless the director exists."""
		if not self.director_exists(director_id):
			logger.warning(f"[Checker] Director {director_id} not found")
			raise NotFoundError('director', director_id)
