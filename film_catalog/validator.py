"""
Field-level validation of films.
Runs before every create/update so a rejected film never reaches the store.
"""

from datetime import date  # release date bounds

from loguru import logger  # console logging

from .errors import ValidationError  # validation failure signal
from .models import Film  # film record


# First public film screening; nothing can be released earlier
EARLIEST_RELEASE_DATE = date(1895, 12, 28)
MAX_DESCRIPTION_LENGTH = 200


class Validator:
	"""
	Checks the scalar fields of a film:
	- name: non-blank
	- description: at most MAX_DESCRIPTION_LENGTH characters
	- release_date: present and not before EARLIEST_RELEASE_DATE
	- duration: positive integer (minutes)
	- rating: present with a positive id
	"""

	def validate_film(self, film: Film):
		"""Raise ValidationError describing the first violated rule."""
		problem = self._first_problem(film)  # None when the film is valid
		if problem:
			logger.warning(f"[Validator] Rejected film id={film.id} name={film.name!r}: {problem}")
			raise ValidationError(problem)

	def _first_problem(self, film: Film):
		if not film.name or not film.name.strip():  # None, empty or whitespace
			return "film name must not be blank"
		if film.description and len(film.description) > MAX_DESCRIPTION_LENGTH:
			return f"description must be at most {MAX_DESCRIPTION_LENGTH} characters"
		if film.release_date is None:
			return "release date is required"
		if film.release_date < EARLIEST_RELEASE_DATE:
			return f"release date must not be earlier than {EARLIEST_RELEASE_DATE.isoformat()}"
		# bool is an int subclass but never a duration
		if isinstance(film.duration, bool) or not isinstance(film.duration, int) or film.duration <= 0:
			return "duration must be a positive number of minutes"
		if film.rating is None or film.rating.id is None or film.rating.id <= 0:
			return "age rating is required"
		return None
