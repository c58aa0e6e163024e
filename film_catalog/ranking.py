"""
Ranking module.
Builds the SELECT statements that order films by popularity and the predicates that filter them.
"""

from sqlalchemy import Select, exists, extract, func, select

from .schema import directors, film_director, films, films_genres, films_likes, ratings


# Scalar film columns plus the resolved rating name, in the shape row_to_film expects
FILM_COLUMNS = (
	films.c.film_id,
	films.c.name,
	films.c.description,
	films.c.release_date,
	films.c.duration,
	films.c.rating_id,
	ratings.c.rating_name,
)


def film_select() -> Select:
	"""Unordered select of every film joined with its rating."""
	return select(*FILM_COLUMNS).select_from(
		films.join(ratings, ratings.c.rating_id == films.c.rating_id)
	)


class FilmRanker:
	"""
	Orders films by popularity:
	- popularity: number of likes the film has received (0 when none)
	- ties: lower film id first, so equal counts come back in a stable order
	Likes are counted in a grouped subquery, so joining the genre or director
	relations for filtering never inflates a film's count.
	"""

	def __init__(self):
		self.like_counts = (
			select(films_likes.c.film_id, func.count(films_likes.c.user_id).label('likes_count'))
			.group_by(films_likes.c.film_id)
			.subquery('like_counts')
		)
		self.popularity = func.coalesce(self.like_counts.c.likes_count, 0)

	def ranked_select(self) -> Select:
		"""Every film, most liked first."""
		return (
			select(*FILM_COLUMNS)
			.select_from(
				films.join(ratings, ratings.c.rating_id == films.c.rating_id)
				.outerjoin(self.like_counts, self.like_counts.c.film_id == films.c.film_id)
			)
			.order_by(self.popularity.desc(), films.c.film_id.asc())
		)

	def top(self, count: int, *predicates) -> Select:
		"""The *count* most liked films matching all *predicates*."""
		return self.ranked_select().where(*predicates).limit(count)


# ── predicates ─────────────────────────────────────────────────────────────
def has_genre(genre_id: int):
	return exists().where(
		films_genres.c.film_id == films.c.film_id,
		films_genres.c.genre_id == genre_id,
	)


def has_director(director_id: int):
	return exists().where(
		film_director.c.film_id == films.c.film_id,
		film_director.c.director_id == director_id,
	)


def released_in(year: int):
	# calendar year only, month and day are irrelevant
	return extract('year', films.c.release_date) == year


def title_matches(query: str):
	# LIKE semantics: % and _ in the query act as wildcards, '' matches everything
	return films.c.name.ilike(f"%{query}%")


def director_name_matches(query: str):
	return exists().where(
		film_director.c.film_id == films.c.film_id,
		film_director.c.director_id == directors.c.director_id,
		directors.c.director_name.ilike(f"%{query}%"),
	)


def liked_by_all(user_ids):
	"""Films liked by every user in *user_ids*, counted in one grouped query."""
	pair = set(user_ids)
	liked = (
		select(films_likes.c.film_id)
		.where(films_likes.c.user_id.in_(pair))
		.group_by(films_likes.c.film_id)
		.having(func.count(films_likes.c.user_id.distinct()) >= len(pair))
	)
	return films.c.film_id.in_(liked)


def liked_by(user_id: int):
	return films.c.film_id.in_(
		select(films_likes.c.film_id).where(films_likes.c.user_id == user_id)
	)
