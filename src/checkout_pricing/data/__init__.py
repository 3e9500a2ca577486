"""Data subpackage - catalogue storage and seeding."""
from .catalogue import Catalogue, SqliteCatalogue, InMemoryCatalogue, connect
from .build_catalogue import setup

__all__ = ['Catalogue', 'SqliteCatalogue', 'InMemoryCatalogue', 'connect', 'setup']
