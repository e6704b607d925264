"""
Gunicorn configuration for the Cadence API.

Env vars that override defaults:
  PORT     : TCP port to bind
  WORKERS  : number of worker processes (default: 2)

Recap ingestion serializes per (owner, date) inside a worker process only,
so a single-owner deployment is safest with WORKERS=1.
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

workers = int(os.environ.get("WORKERS", "2"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# The summarizer call can take most of a minute; leave headroom above
# SUMMARIZER_TIMEOUT_SECONDS.
timeout = 120

# Stdout only; the platform captures it.
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

graceful_timeout = 30

wsgi_app = "cadence.main:app"
