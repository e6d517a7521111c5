"""Gunicorn config for container deployment."""
import os

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# One uvicorn worker: the row buffer, realtime subscription and insights live
# in process, so a second worker would hold a second, diverging dashboard.
worker_class = "uvicorn.workers.UvicornWorker"
workers = 1

# Startup fetches the active table before the worker accepts requests
timeout = 120

# Graceful timeout for shutdown
graceful_timeout = 30

# Keep-alive must exceed the proxy keep-alive (default 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("TABLEVISION_LOG_LEVEL", "info").lower()
