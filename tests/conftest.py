"""
Shared fixtures: a fresh in-memory catalog per test plus small helpers that
create the rows this package only reads (users, likes, directors).
"""

from datetime import date

import pytest
from sqlalchemy import insert, select

from film_catalog.checker import ExistenceChecker
from film_catalog.database import create_catalog_engine
from film_catalog.film_queries import FilmQueryEngine
from film_catalog.film_repository import FilmRepository
from film_catalog.lookups import DirectorLookup, GenreLookup
from film_catalog.models import AgeRating, Director, Film, Genre
from film_catalog.schema import (
	create_schema,
	directors,
	films_likes,
	genres,
	ratings,
	seed_reference_data,
	users,
)


@pytest.fixture
def engine():
	engine = create_catalog_engine('sqlite://')
	create_schema(engine)
	seed_reference_data(engine)
	yield engine
	engine.dispose()


@pytest.fixture
def checker(engine):
	return ExistenceChecker(engine)


@pytest.fixture
def queries(engine, checker):
	return FilmQueryEngine(engine, checker, GenreLookup(engine), DirectorLookup(engine))


@pytest.fixture
def repository(engine, checker):
	return FilmRepository(engine, checker)


@pytest.fixture
def rating(engine):
	"""Look up a seeded age rating by name."""
	def _rating(name='PG'):
		with engine.connect() as conn:
			rating_id = conn.execute(select(ratings.c.rating_id).where(ratings.c.rating_name == name)).scalar_one()
		return AgeRating(id=rating_id, name=name)
	return _rating


@pytest.fixture
def genre(engine):
	"""Look up a seeded genre by name."""
	def _genre(name):
		with engine.connect() as conn:
			genre_id = conn.execute(select(genres.c.genre_id).where(genres.c.genre_name == name)).scalar_one()
		return Genre(id=genre_id, name=name)
	return _genre


@pytest.fixture
def add_director(engine):
	def _add(name):
		with engine.begin() as conn:
			director_id = conn.execute(insert(directors).values(director_name=name)).inserted_primary_key[0]
		return Director(id=director_id, name=name)
	return _add


@pytest.fixture
def add_user(engine):
	def _add(user_id):
		with engine.begin() as conn:
			conn.execute(insert(users).values(
				user_id=user_id,
				email=f"user{user_id}@example.com",
				login=f"user{user_id}",
				name=f"User {user_id}",
				birthday=date(1990, 1, 1),
			))
		return user_id
	return _add


@pytest.fixture
def add_like(engine):
	def _add(user_id, film_id):
		with engine.begin() as conn:
			conn.execute(insert(films_likes).values(user_id=user_id, film_id=film_id))
	return _add


@pytest.fixture
def make_film(repository, rating):
	"""Create a film and attach its genres/directors the way a caller would (two phases)."""
	def _make(name, release_date=date(2020, 5, 1), duration=100, genres=None, directors=None,
			  description='', rating_name='PG'):
		film = Film(
			name=name,
			description=description,
			release_date=release_date,
			duration=duration,
			rating=rating(rating_name),
			genres=set(genres) if genres is not None else None,
			directors=set(directors) if directors is not None else None,
		)
		repository.create(film)
		repository.attach_genres(film)
		repository.attach_directors(film)
		return film
	return _make


@pytest.fixture
def users_1_to_5(add_user):
	return [add_user(i) for i in range(1, 6)]
