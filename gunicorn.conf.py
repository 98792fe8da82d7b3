"""
Gunicorn configuration for the Nivra journal server.

Serves the local, single-user widget API.
Env vars that override defaults:
  HOST     - interface to bind (default: 127.0.0.1, local only)
  PORT     - TCP port to bind (default: 8000)
"""
import os

bind = f"{os.environ.get('HOST', '127.0.0.1')}:{os.environ.get('PORT', '8000')}"

# Exactly one worker: the widget state lives in process memory and is the
# only writer of the storage slots.
workers = 1

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5
timeout = 60

# Logging: stdout only.
loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
