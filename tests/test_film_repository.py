"""
Unit tests for FilmRepository: create/update/delete and association management.
Run: pytest tests/test_film_repository.py
"""

from datetime import date

import pytest
from sqlalchemy import func, insert, select

from film_catalog.errors import NotFoundError, StoreError, ValidationError
from film_catalog.models import AgeRating, Film, Genre
from film_catalog.schema import film_director, films, films_genres, films_likes


def count_rows(engine, table, **where):
	stmt = select(func.count()).select_from(table)
	for column, value in where.items():
		stmt = stmt.where(table.c[column] == value)
	with engine.connect() as conn:
		return conn.execute(stmt).scalar_one()


def test_create_assigns_id_and_round_trips(repository, queries, rating):
	film = Film(
		name='Alpha',
		description='First film',
		release_date=date(2020, 5, 1),
		duration=100,
		rating=rating('PG'),
	)
	created = repository.create(film)

	assert created is film
	assert film.id is not None

	stored = queries.get_by_id(film.id)
	assert stored.id == film.id
	assert stored.name == 'Alpha'
	assert stored.description == 'First film'
	assert stored.release_date == date(2020, 5, 1)
	assert stored.duration == 100
	assert stored.rating == rating('PG')
	assert stored.rating.name == 'PG'
	assert stored.genres == set()
	assert stored.directors == set()


def test_create_assigns_distinct_ids(make_film):
	first, second = make_film('One'), make_film('Two')
	assert first.id != second.id


def test_create_rejects_invalid_film_without_writing(engine, repository, rating):
	film = Film(name='', release_date=date(2020, 1, 1), duration=90, rating=rating('G'))
	with pytest.raises(ValidationError):
		repository.create(film)
	assert film.id is None
	assert count_rows(engine, films) == 0


def test_create_rejects_unknown_rating(engine, repository):
	film = Film(name='Alpha', release_date=date(2020, 1, 1), duration=90, rating=AgeRating(id=99))
	with pytest.raises(ValidationError, match='rating'):
		repository.create(film)
	assert count_rows(engine, films) == 0


def test_create_does_not_attach_associations(engine, repository, rating, genre):
	film = Film(name='Alpha', release_date=date(2020, 1, 1), duration=90, rating=rating('G'),
				genres={genre('Drama')})
	repository.create(film)
	assert count_rows(engine, films_genres, film_id=film.id) == 0


def test_update_overwrites_scalars_only(repository, queries, make_film, genre, rating):
	film = make_film('Alpha', genres=[genre('Drama')])
	film.name = 'Alpha Redux'
	film.description = 'Recut'
	film.release_date = date(2021, 1, 2)
	film.duration = 120
	film.rating = rating('R')
	film.genres = {genre('Comedy')}

	repository.update(film)

	stored = queries.get_by_id(film.id)
	assert (stored.name, stored.description, stored.release_date, stored.duration) == \
		('Alpha Redux', 'Recut', date(2021, 1, 2), 120)
	assert stored.rating.name == 'R'
	assert stored.genres == {genre('Drama')}


def test_update_missing_film_raises_not_found(repository, rating):
	film = Film(id=404, name='Ghost', release_date=date(2020, 1, 1), duration=90, rating=rating('G'))
	with pytest.raises(NotFoundError):
		repository.update(film)


def test_update_validates_before_existence(repository):
	film = Film(id=404, name='', release_date=date(2020, 1, 1), duration=90, rating=AgeRating(id=1))
	with pytest.raises(ValidationError):
		repository.update(film)


def test_update_invalid_film_leaves_row_unchanged(repository, queries, make_film):
	film = make_film('Alpha')
	film.name = ' '
	with pytest.raises(ValidationError):
		repository.update(film)
	assert queries.get_by_id(film.id).name == 'Alpha'


def test_delete_then_get_by_id_raises_not_found(repository, queries, make_film):
	film = make_film('Alpha')
	repository.delete(film.id)
	with pytest.raises(NotFoundError):
		queries.get_by_id(film.id)


def test_delete_missing_film_raises_not_found(repository):
	with pytest.raises(NotFoundError):
		repository.delete(1)


def test_delete_cascades_likes_and_associations(engine, repository, make_film, genre, add_director,
												 add_user, add_like):
	film = make_film('Alpha', genres=[genre('Drama')], directors=[add_director('Smith')])
	add_like(add_user(1), film.id)

	repository.delete(film.id)

	assert count_rows(engine, films_genres, film_id=film.id) == 0
	assert count_rows(engine, film_director, film_id=film.id) == 0
	assert count_rows(engine, films_likes, film_id=film.id) == 0


def test_attach_is_noop_for_unset_or_empty_sets(engine, repository, make_film):
	film = make_film('Alpha')
	film.genres = None
	film.directors = set()
	repository.attach_genres(film)
	repository.attach_directors(film)
	assert count_rows(engine, films_genres) == 0
	assert count_rows(engine, film_director) == 0


def test_repeated_attach_keeps_set_semantics(engine, repository, queries, make_film, genre, add_director):
	smith = add_director('Smith')
	film = make_film('Alpha', genres=[genre('Drama')], directors=[smith])

	repository.attach_genres(film)
	repository.attach_directors(film)
	film.genres = {genre('Drama'), genre('Thriller')}
	repository.attach_genres(film)

	assert count_rows(engine, films_genres, film_id=film.id) == 2
	assert count_rows(engine, film_director, film_id=film.id) == 1
	assert queries.get_by_id(film.id).genres == {genre('Drama'), genre('Thriller')}


def test_attach_requires_created_film(repository, rating, genre):
	film = Film(name='Alpha', release_date=date(2020, 1, 1), duration=90, rating=rating('G'),
				genres={genre('Drama')})
	with pytest.raises(ValidationError):
		repository.attach_genres(film)


def test_attach_unknown_genre_surfaces_store_error(repository, make_film):
	film = make_film('Alpha')
	film.genres = {Genre(id=999)}
	with pytest.raises(StoreError):
		repository.attach_genres(film)


def test_detach_removes_only_named_members(repository, queries, make_film, genre, add_director):
	smith, jones = add_director('Smith'), add_director('Jones')
	film = make_film('Alpha', genres=[genre('Drama'), genre('Comedy')], directors=[smith, jones])

	film.genres = {genre('Comedy')}
	film.directors = {jones}
	repository.detach_genres(film)
	repository.detach_directors(film)

	stored = queries.get_by_id(film.id)
	assert stored.genres == {genre('Drama')}
	assert stored.directors == {smith}


def test_same_user_cannot_like_a_film_twice(engine, make_film, add_user, add_like):
	film = make_film('Alpha')
	add_like(add_user(1), film.id)

	with pytest.raises(StoreError):
		add_like(1, film.id)
	assert count_rows(engine, films_likes, film_id=film.id) == 1


def test_store_rejects_duplicate_association_rows(engine, make_film, genre, add_director):
	smith = add_director('Smith')
	film = make_film('Alpha', genres=[genre('Drama')], directors=[smith])

	# written straight to the join tables, the way a concurrent attach would collide
	with pytest.raises(StoreError):
		with engine.begin() as conn:
			conn.execute(insert(films_genres).values(film_id=film.id, genre_id=genre('Drama').id))
	with pytest.raises(StoreError):
		with engine.begin() as conn:
			conn.execute(insert(film_director).values(film_id=film.id, director_id=smith.id))

	assert count_rows(engine, films_genres, film_id=film.id) == 1
	assert count_rows(engine, film_director, film_id=film.id) == 1
