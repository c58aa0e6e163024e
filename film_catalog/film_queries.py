"""
Film query engine.
Answers the read-only catalog queries: popularity rankings, year/genre filters,
director listings, text search and like-based views.
"""

import functools  # wraps for the hydration decorator
from typing import Callable, List  # type annotations for clarity

from sqlalchemy.engine import Engine  # explicit storage handle

# Import project modules for data structures and collaborators
from .models import AgeRating, Film  # core data classes
from .checker import ExistenceChecker  # NotFound before querying
from .lookups import DirectorLookup, GenreLookup  # association hydration
from .errors import NotFoundError, ValidationError  # missing rows, bad query arguments
from .schema import films  # table columns for ordering
from .ranking import (
	FilmRanker,
	director_name_matches,
	film_select,
	has_director,
	has_genre,
	liked_by,
	liked_by_all,
	released_in,
	title_matches,
)

# Import loguru for console logging
from loguru import logger  # simple structured logger


def row_to_film(row) -> Film:
	"""Map one result row (see ranking.FILM_COLUMNS) to a Film without associations."""
	return Film(
		id=row.film_id,
		name=row.name,
		description=row.description or '',
		release_date=row.release_date,
		duration=row.duration,
		rating=AgeRating(id=row.rating_id, name=row.rating_name),
	)


def hydrated(method: Callable[..., List[Film]]) -> Callable[..., List[Film]]:
	"""Run the wrapped query, then populate genres and directors of every film it returned."""
	@functools.wraps(method)
	def wrapper(self, *args, **kwargs):
		return self.hydrate(method(self, *args, **kwargs))
	return wrapper


class FilmQueryEngine:
	"""
	Read side of the catalog.
	Every query is a single statement against the store; queries decorated with
	@hydrated add one lookup round trip per returned film for its associations.

	Hydrated (genres and directors populated):
	- get_by_id
	- get_top_by_genre, get_top_by_genre_and_year
	- get_by_director_sorted_by_year, get_by_director_sorted_by_popularity
	- search_by_director_name, search_by_title_or_director_name
	Everything else leaves genres/directors as None; pass the result through
	hydrate() when the associations are needed.
	"""
	def __init__(
		self,
		engine: Engine,  # shared storage handle
		checker: ExistenceChecker,  # identity checks
		genre_lookup: GenreLookup,  # film -> genres
		director_lookup: DirectorLookup,  # film -> directors
	):
		self.engine = engine  # keep handle reference
		self.checker = checker  # existence checker
		self.genre_lookup = genre_lookup  # genre accessor
		self.director_lookup = director_lookup  # director accessor
		self.ranker = FilmRanker()  # popularity ordering

	def _fetch(self, stmt) -> List[Film]:
		"""Execute a select and map every row to a Film."""
		with self.engine.connect() as conn:  # short-lived connection per query
			return [row_to_film(row) for row in conn.execute(stmt)]  # map rows

	@staticmethod
	def _check_count(count: int):
		# bool is an int subclass but never a result size
		if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
			logger.warning(f"[Queries] Rejected result count {count!r}")
			raise ValidationError("count must be a positive integer")

	def hydrate(self, films_: List[Film]) -> List[Film]:
		"""Populate the genre and director sets of each film in place; order is kept."""
		for film in films_:  # one pair of lookups per film
			film.genres = self.genre_lookup.genres_of(film)  # attached genres
			film.directors = self.director_lookup.directors_of(film)  # attached directors
		logger.debug(f"[Queries] Hydrated {len(films_)} films")  # trace
		return films_

	# ───────────────────────────── single / all ────────────────────────────
	def get_by_id(self, film_id: int) -> Film:
		"""Return one hydrated film; NotFoundError if the id does not resolve."""
		self.checker.check_film_exists(film_id)  # explicit signal before the query
		stmt = film_select().where(films.c.film_id == film_id)  # single row
		found = self._fetch(stmt)
		if not found:  # deleted after the existence check
			logger.warning(f"[Queries] Film {film_id} vanished before it was read")
			raise NotFoundError('film', film_id)
		return self.hydrate(found)[0]

	def get_all(self) -> List[Film]:
		"""Return every film ordered by id (associations not loaded)."""
		result = self._fetch(film_select().order_by(films.c.film_id))  # id ascending
		logger.info(f"[Queries] get_all returned {len(result)} films")  # summary
		return result

	# ───────────────────────────── rankings ────────────────────────────────
	def get_top_liked(self, count: int) -> List[Film]:
		"""Return the *count* most liked films."""
		self._check_count(count)  # guard
		result = self._fetch(self.ranker.top(count))  # ranked + limited
		logger.info(f"[Queries] Top {count} liked: {len(result)} films")  # summary
		return result

	@hydrated
	def get_top_by_genre(self, count: int, genre_id: int) -> List[Film]:
		"""Return the *count* most liked films carrying the genre."""
		self._check_count(count)  # guard
		result = self._fetch(self.ranker.top(count, has_genre(genre_id)))  # genre filter
		logger.info(f"[Queries] Top {count} for genre={genre_id}: {len(result)} films")  # summary
		return result

	def get_top_by_year(self, count: int, year: int) -> List[Film]:
		"""Return the *count* most liked films released in the calendar year."""
		self._check_count(count)  # guard
		result = self._fetch(self.ranker.top(count, released_in(year)))  # year filter
		logger.info(f"[Queries] Top {count} for year={year}: {len(result)} films")  # summary
		return result

	@hydrated
	def get_top_by_genre_and_year(self, count: int, genre_id: int, year: int) -> List[Film]:
		"""Return the *count* most liked films carrying the genre and released in the year."""
		self._check_count(count)  # guard
		stmt = self.ranker.top(count, has_genre(genre_id), released_in(year))  # both filters
		result = self._fetch(stmt)
		logger.info(f"[Queries] Top {count} for genre={genre_id} year={year}: {len(result)} films")  # summary
		return result

	# ───────────────────────────── directors ───────────────────────────────
	@hydrated
	def get_by_director_sorted_by_year(self, director_id: int) -> List[Film]:
		"""Return all films of the director, earliest release first."""
		self.checker.check_director_exists(director_id)  # unknown director is an error
		stmt = (
			film_select()
			.where(has_director(director_id))
			.order_by(films.c.release_date.asc(), films.c.film_id.asc())  # date, then id
		)
		result = self._fetch(stmt)
		logger.info(f"[Queries] Director {director_id} by year: {len(result)} films")  # summary
		return result

	@hydrated
	def get_by_director_sorted_by_popularity(self, director_id: int) -> List[Film]:
		"""Return all films of the director, most liked first."""
		self.checker.check_director_exists(director_id)  # unknown director is an error
		stmt = self.ranker.ranked_select().where(has_director(director_id))  # no limit
		result = self._fetch(stmt)
		logger.info(f"[Queries] Director {director_id} by likes: {len(result)} films")  # summary
		return result

	# ───────────────────────────── search ──────────────────────────────────
	def search_by_title(self, query: str) -> List[Film]:
		"""Case-insensitive substring search over titles, most liked first."""
		logger.debug(f"[Queries] Title search: {query!r}")  # trace
		result = self._fetch(self.ranker.ranked_select().where(title_matches(query)))
		logger.info(f"[Queries] Title search {query!r} matched {len(result)} films")  # summary
		return result

	@hydrated
	def search_by_director_name(self, query: str) -> List[Film]:
		"""Case-insensitive substring search over director names, most liked first."""
		logger.debug(f"[Queries] Director search: {query!r}")  # trace
		result = self._fetch(self.ranker.ranked_select().where(director_name_matches(query)))
		logger.info(f"[Queries] Director search {query!r} matched {len(result)} films")  # summary
		return result

	@hydrated
	def search_by_title_or_director_name(self, query: str) -> List[Film]:
		"""Films whose title or any director name contains *query*, most liked first."""
		logger.debug(f"[Queries] Title/director search: {query!r}")  # trace
		stmt = self.ranker.ranked_select().where(title_matches(query) | director_name_matches(query))
		result = self._fetch(stmt)
		logger.info(f"[Queries] Title/director search {query!r} matched {len(result)} films")  # summary
		return result

	# ───────────────────────────── likes ───────────────────────────────────
	def get_common_films(self, user_id: int, friend_id: int) -> List[Film]:
		"""Films liked by both users, most liked first."""
		self.checker.check_user_exists(user_id)  # both ids must resolve
		self.checker.check_user_exists(friend_id)
		stmt = self.ranker.ranked_select().where(liked_by_all((user_id, friend_id)))  # one grouped query
		result = self._fetch(stmt)
		logger.info(f"[Queries] Common films of users {user_id} and {friend_id}: {len(result)}")  # summary
		return result

	def get_films_liked_by_user(self, user_id: int) -> List[Film]:
		"""All films the user liked, ordered by id."""
		self.checker.check_user_exists(user_id)  # unknown user is an error
		result = self._fetch(film_select().where(liked_by(user_id)).order_by(films.c.film_id))
		logger.info(f"[Queries] User {user_id} liked {len(result)} films")  # summary
		return result
