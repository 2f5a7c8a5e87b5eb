from .slugger import Slugger, slugify
from .urls import is_protocol_relative, resolve_url

__all__ = [
    "Slugger",
    "slugify",
    "is_protocol_relative",
    "resolve_url",
]
