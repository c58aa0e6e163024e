"""
Relational schema of the Film Catalog.
Tables are declared with SQLAlchemy Core; join tables use composite primary keys
so every association and like is stored at most once.
"""

from sqlalchemy import (
	Column,
	Date,
	ForeignKey,
	Integer,
	MetaData,
	String,
	Table,
	insert,
	select,
)
from sqlalchemy.engine import Engine

from loguru import logger

metadata = MetaData()

ratings = Table(
	'ratings',
	metadata,
	Column('rating_id', Integer, primary_key=True),
	Column('rating_name', String(10), nullable=False, unique=True),
)

genres = Table(
	'genres',
	metadata,
	Column('genre_id', Integer, primary_key=True),
	Column('genre_name', String(50), nullable=False, unique=True),
)

directors = Table(
	'directors',
	metadata,
	Column('director_id', Integer, primary_key=True),
	Column('director_name', String(100), nullable=False),
)

users = Table(
	'users',
	metadata,
	Column('user_id', Integer, primary_key=True),
	Column('email', String(100), nullable=False, unique=True),
	Column('login', String(50), nullable=False, unique=True),
	Column('name', String(100)),
	Column('birthday', Date),
)

films = Table(
	'films',
	metadata,
	Column('film_id', Integer, primary_key=True),
	Column('name', String(200), nullable=False),
	Column('description', String(200)),
	Column('release_date', Date, nullable=False),
	Column('duration', Integer, nullable=False),
	Column('rating_id', Integer, ForeignKey('ratings.rating_id'), nullable=False),
)

films_genres = Table(
	'films_genres',
	metadata,
	Column('film_id', Integer, ForeignKey('films.film_id', ondelete='CASCADE'), primary_key=True),
	Column('genre_id', Integer, ForeignKey('genres.genre_id', ondelete='CASCADE'), primary_key=True),
)

film_director = Table(
	'film_director',
	metadata,
	Column('film_id', Integer, ForeignKey('films.film_id', ondelete='CASCADE'), primary_key=True),
	Column('director_id', Integer, ForeignKey('directors.director_id', ondelete='CASCADE'), primary_key=True),
)

films_likes = Table(
	'films_likes',
	metadata,
	Column('film_id', Integer, ForeignKey('films.film_id', ondelete='CASCADE'), primary_key=True),
	Column('user_id', Integer, ForeignKey('users.user_id', ondelete='CASCADE'), primary_key=True),
)

# Reference rows every catalog starts with
DEFAULT_RATINGS = ['G', 'PG', 'PG-13', 'R', 'NC-17']
DEFAULT_GENRES = ['Comedy', 'Drama', 'Cartoon', 'Thriller', 'Documentary', 'Action']


def create_schema(engine: Engine):
	"""Create all catalog tables that do not exist yet."""
	metadata.create_all(engine)
	logger.info(f"[Schema] Ensured {len(metadata.tables)} tables on {engine.url.render_as_string(hide_password=True)}")


def seed_reference_data(engine: Engine):
	"""Insert the default ratings and genres that are missing; existing rows are kept."""
	with engine.begin() as conn:
		known_ratings = set(conn.execute(select(ratings.c.rating_name)).scalars())
		missing_ratings = [{'rating_name': n} for n in DEFAULT_RATINGS if n not in known_ratings]
		if missing_ratings:
			conn.execute(insert(ratings), missing_ratings)

		known_genres = set(conn.execute(select(genres.c.genre_name)).scalars())
		missing_genres = [{'genre_name': n} for n in DEFAULT_GENRES if n not in known_genres]
		if missing_genres:
			conn.execute(insert(genres), missing_genres)

	logger.info(f"[Schema] Seeded {len(missing_ratings)} ratings and {len(missing_genres)} genres")
