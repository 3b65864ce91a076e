import os

# Must be set before roombook.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_CREATE_TABLES"] = "true"
