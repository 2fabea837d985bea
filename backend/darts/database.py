from databases import Database

from darts.config import config

database = Database(config.database_url)
