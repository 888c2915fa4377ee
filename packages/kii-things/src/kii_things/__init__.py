"""Kii Things - typed Kii Cloud and thing-if operations."""

from . import schemas
from .operations import APIAuthor, anonymous_login
from .schemas import *

__all__ = ["APIAuthor", "anonymous_login"] + schemas.__all__
