"""Built-in loaders: ``text`` (raw HTTP body) and ``json`` (decoded body)."""

from .base import Loader
from .http import HttpLoader
from .json import JsonLoader

__all__ = ["HttpLoader", "JsonLoader", "Loader"]
