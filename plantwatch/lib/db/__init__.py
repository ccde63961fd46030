"""Async database operations for the Plantwatch application.

This package provides a read-only aiosqlite adapter over the plant, room,
species and moisture time series tables owned by the plant data layer.

See connection.py for details on connection patterns (persistent vs pooled).
"""

from plantwatch.lib.db.connection import ConnectionPool as ConnectionPool
from plantwatch.lib.db.connection import Database as Database
from plantwatch.lib.db.connection import close_db as close_db
from plantwatch.lib.db.connection import create_schema as create_schema
from plantwatch.lib.db.connection import get_db as get_db
from plantwatch.lib.db.connection import init_db as init_db
from plantwatch.lib.db.queries import SQLitePlantRepository as SQLitePlantRepository
from plantwatch.lib.db.types import MoistureRow as MoistureRow
from plantwatch.lib.db.types import PlantRow as PlantRow
from plantwatch.lib.db.types import SQLParams as SQLParams
