import os

server_mode = os.getenv("SERVER_MODE", "development")
"""The operational mode of the server."""

database_url = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")
"""The tortoise connection url of the record store."""

api_root = "/api/v1"
"""The base url for the api."""

jwt_secret = os.getenv("JWT_SECRET")
"""The secret used to verify bearer tokens."""

jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
"""The signing algorithm of the bearer tokens."""

rate_per_hour = float(os.getenv("RATE_PER_HOUR", "10"))
"""The price of every started hour of a ride."""

sentry_dsn = os.getenv("SENTRY_DSN")
"""The sentry project to report exceptions to."""

qr_code_border = int(os.getenv("QR_CODE_BORDER", "2"))
"""The quiet zone around the generated QR codes (in modules)."""
