"""
Data models for the Film Catalog.
Defines the core records shared by the query engine and the repository.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Optional, Set  # optional values and association sets
from datetime import date  # release dates


@dataclass(frozen=True)
class AgeRating:
	"""Age rating of a film (G, PG, ...). Compared by id only."""
	id: int  # rating identity
	name: Optional[str] = field(default=None, compare=False)  # display name, resolved on read


@dataclass(frozen=True)
class Genre:
	"""Genre referenced by films. Compared by id only."""
	id: int  # genre identity
	name: Optional[str] = field(default=None, compare=False)  # display name


@dataclass(frozen=True)
class Director:
	"""Director referenced by films. Compared by id only."""
	id: int  # director identity
	name: Optional[str] = field(default=None, compare=False)  # display name


@dataclass
class Film:
	"""
	A single catalog entry.
	Association sets stay None until the film is hydrated; an empty set means
	the film was hydrated and has nothing attached.
	"""
	name: str  # film title
	release_date: Optional[date]  # premiere date
	duration: int  # runtime in minutes
	rating: Optional[AgeRating]  # exactly one age rating
	description: str = ''  # short synopsis
	id: Optional[int] = None  # assigned by the store on create
	genres: Optional[Set[Genre]] = None  # attached genres
	directors: Optional[Set[Director]] = None  # attached directors
