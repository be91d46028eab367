"""
Gunicorn configuration for the LeetBoard API.

Env vars that override defaults:
  PORT: TCP port to bind
  WORKERS: number of worker processes (default: 2)
  TIMEOUT: seconds before a silent worker is killed (default: 300)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# POST /refresh-stats walks the roster sequentially and can take minutes for
# large groups, so the worker timeout is generous.
timeout = int(os.environ.get("TIMEOUT", "300"))

# stdout only; the app's own logging goes to stderr via app.core.logging_config
loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30
