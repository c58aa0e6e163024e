"""
Film repository.
Create/update/delete of a film's scalar row and management of its genre and director associations.
Every mutation runs in a single transaction; store errors propagate unchanged.
"""

from typing import Optional, Set

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, Engine

from loguru import logger

from .checker import ExistenceChecker
from .errors import ValidationError
from .models import Film
from .schema import film_director, films, films_genres
from .validator import Validator


class FilmRepository:
	"""Write side of the catalog."""

	def __init__(self, engine: Engine, checker: ExistenceChecker, validator: Optional[Validator] = None):
		self.engine = engine
		self.checker = checker
		self.validator = validator or Validator()

	def _validate(self, film: Film):
		"""Field rules first, then the rating reference against the store."""
		self.validator.validate_film(film)
		if not self.checker.rating_exists(film.rating.id):
			logger.warning(f"[Repository] Unknown age rating id={film.rating.id}")
			raise ValidationError(f"age rating with id={film.rating.id} does not exist")

	@staticmethod
	def _scalar_values(film: Film) -> dict:
		return {
			'name': film.name,
			'description': film.description,
			'release_date': film.release_date,
			'duration': film.duration,
			'rating_id': film.rating.id,
		}

	# ───────────────────────────── film rows ───────────────────────────────
	def create(self, film: Film) -> Film:
		"""
		Insert the scalar row and assign the generated id to *film*.

		Associations are not written here; call attach_genres / attach_directors
		once the film has its id.

		Raises
		------
		ValidationError
			If a field rule fails or the rating does not exist.
		"""
		self._validate(film)
		with self.engine.begin() as conn:
			result = conn.execute(insert(films).values(**self._scalar_values(film)))
			film.id = result.inserted_primary_key[0]
		logger.info(f"[Repository] Created film id={film.id} name={film.name!r}")
		return film

	def update(self, film: Film) -> Film:
		"""Overwrite every scalar field of an existing film; associations are untouched."""
		self._validate(film)
		self.checker.check_film_exists(film.id)
		with self.engine.begin() as conn:
			conn.execute(
				update(films).where(films.c.film_id == film.id).values(**self._scalar_values(film))
			)
		logger.info(f"[Repository] Updated film id={film.id}")
		return film

	def delete(self, film_id: int):
		"""Remove the film row; the store cascades likes and associations."""
		self.checker.check_film_exists(film_id)
		with self.engine.begin() as conn:
			conn.execute(delete(films).where(films.c.film_id == film_id))
		logger.info(f"[Repository] Deleted film id={film_id}")

	# ───────────────────────────── associations ────────────────────────────
	@staticmethod
	def _require_id(film: Film):
		if film.id is None:
			raise ValidationError("film must be created before associations can be attached")

	@staticmethod
	def _attach(conn: Connection, table, column, film_id: int, member_ids: Set[int]) -> int:
		"""
		Insert (film_id, member) rows that are not stored yet; return how many were added.

		The read and the insert share one transaction but are not atomic below
		SERIALIZABLE: two callers attaching the same member at once can both see it
		missing, and the later insert then fails on the composite primary key with
		an IntegrityError. The stored set stays correct; that caller may retry.
		"""
		stored = set(conn.execute(select(column).where(table.c.film_id == film_id)).scalars())
		missing = sorted(member_ids - stored)
		if missing:
			conn.execute(insert(table), [{'film_id': film_id, column.key: m} for m in missing])
		return len(missing)

	def attach_genres(self, film: Film):
		"""Attach every genre in film.genres; already attached genres are skipped."""
		if not film.genres:  # None or empty is a no-op
			return
		self._require_id(film)
		with self.engine.begin() as conn:
			added = self._attach(conn, films_genres, films_genres.c.genre_id, film.id, {g.id for g in film.genres})
		logger.info(f"[Repository] Film {film.id}: attached {added} of {len(film.genres)} genres")

	def attach_directors(self, film: Film):
		"""Attach every director in film.directors; already attached directors are skipped."""
		if not film.directors:  # None or empty is a no-op
			return
		self._require_id(film)
		with self.engine.begin() as conn:
			added = self._attach(
				conn, film_director, film_director.c.director_id, film.id, {d.id for d in film.directors}
			)
		logger.info(f"[Repository] Film {film.id}: attached {added} of {len(film.directors)} directors")

	def detach_genres(self, film: Film):
		"""Remove the association rows for every genre in film.genres."""
		if not film.genres:
			return
		self._require_id(film)
		with self.engine.begin() as conn:
			conn.execute(
				delete(films_genres).where(
					films_genres.c.film_id == film.id,
					films_genres.c.genre_id.in_([g.id for g in film.genres]),
				)
			)
		logger.info(f"[Repository] Film {film.id}: detached genres {sorted(g.id for g in film.genres)}")

	def detach_directors(self, film: Film):
		"""Remove the association rows for every director in film.directors."""
		if not film.directors:
			return
		self._require_id(film)
		with self.engine.begin() as conn:
			conn.execute(
				delete(film_director).where(
					film_director.c.film_id == film.id,
					film_director.c.director_id.in_([d.id for d in film.directors]),
				)
			)
		logger.info(f"[Repository] Film {film.id}: detached directors {sorted(d.id for d in film.directors)}")
