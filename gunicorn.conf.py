"""Gunicorn production configuration for the bulk import API."""
import multiprocessing
import os

bind = os.getenv("BIND", "0.0.0.0:8000")
wsgi_app = "bulk_import.main:app"
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
# Upload requests wait on the import job (IMPORT_RESULT_TIMEOUT_SECONDS)
timeout = int(os.getenv("GUNICORN_TIMEOUT", 180))
keepalive = 5
max_requests = 1000
max_requests_jitter = 100
accesslog = "-"
errorlog = "-"
loglevel = "info"
