import multiprocessing

from todo_api.config import settings

# Gunicorn settings for the todo API
# Run with: gunicorn -c gunicorn_conf.py todo_api.main:app

# Same host/port settings as the single-process server (PORT, default 5000)
bind = f"{settings.listen_host}:{settings.port}"

# One uvicorn worker per (2 x cores) + 1; every worker provisions its own
# connection pool on startup and refuses to boot if the store is unreachable,
# so size this against the database's connection limit
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "uvicorn.workers.UvicornWorker"

timeout = 120
keepalive = 5

# Access and error logs go to stdout/stderr for the platform to collect
accesslog = "-"
errorlog = "-"
loglevel = settings.log_level

name = "todo_api"
reload = False
