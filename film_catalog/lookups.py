"""
Read-only accessors for the film-to-genre and film-to-director relations.
Used to hydrate films after their scalar rows are fetched.
"""

from typing import Set

from sqlalchemy import select
from sqlalchemy.engine import Engine

from .models import Director, Film, Genre
from .schema import directors, film_director, films_genres, genres


class GenreLookup:
	def __init__(self, engine: Engine):
		self.engine = engine

	def genres_of(self, film: Film) -> Set[Genre]:
		"""Return the genres attached to *film* (empty set when none)."""
		stmt = (
			select(genres.c.genre_id, genres.c.genre_name)
			.join(films_genres, films_genres.c.genre_id == genres.c.genre_id)
			.where(films_genres.c.film_id == film.id)
		)
		with self.engine.connect() as conn:
			return {Genre(id=r.genre_id, name=r.genre_name) for r in conn.execute(stmt)}


class DirectorLookup:
	def __init__(self, engine: Engine):
		self.engine = engine

	def directors_of(self, film: Film) -> Set[Director]:
		"""Return the directors attached to *film* (empty set when none)."""
		stmt = (
			select(directors.c.director_id, directors.c.director_name)
			.join(film_director, film_director.c.director_id == directors.c.director_id)
			.where(film_director.c.film_id == film.id)
		)
		with self.engine.connect() as conn:
			return {Director(id=r.director_id, name=r.director_name) for r in conn.execute(stmt)}
