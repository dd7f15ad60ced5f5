import os

bind = os.getenv("GUNICORN_BIND", "127.0.0.1:8000")
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# Covers one blocking SMTP round trip (EMAIL_TIMEOUT) per request
timeout = 90
keepalive = 5

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "contact-relay"

# Server mechanics
daemon = False
umask = 0o007

# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting contact relay")

def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Contact relay is ready. Spawning workers")

def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal, e.g. on request timeout."""
    worker.log.info("Worker received SIGABRT signal")
