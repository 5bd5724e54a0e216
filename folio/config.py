# folio/config.py
import os
import logging

logger = logging.getLogger(__name__)

# Base URL used for canonical and og:url links
SITE_URL = os.getenv('SITE_URL', 'http://localhost:8000').rstrip('/')

# Auth Service URL
AUTH_SERVICE_URL = os.getenv('AUTH_SERVICE_URL', 'http://auth-service:8002')

# Redis Configuration
REDIS_HOST = os.getenv('REDIS_HOST', 'redis-service')
REDIS_PORT = int(os.getenv('REDIS_PORT', '6379'))
REDIS_URL = f"redis://{REDIS_HOST}:{REDIS_PORT}"

# TaskFlow realtime sync: 'memory' or 'redis'
SYNC_BACKEND = os.getenv('SYNC_BACKEND', 'memory').lower()

# Contact form delivery: 'simulated' or 'sqlite'
CONTACT_BACKEND = os.getenv('CONTACT_BACKEND', 'simulated').lower()
DATABASE_PATH = os.getenv('SITE_DATABASE_PATH', '/app/site.db')

if CONTACT_BACKEND == 'sqlite':
    logger.info("💾 Using SQLite database for contact messages")
else:
    logger.info("📨 Contact form delivery is simulated")

# Contact form timings (seconds)
CONTACT_SEND_DELAY = float(os.getenv('CONTACT_SEND_DELAY', '1.5'))
CONTACT_RESET_DELAY = float(os.getenv('CONTACT_RESET_DELAY', '3.0'))
CONTACT_RATE_LIMIT = os.getenv('CONTACT_RATE_LIMIT', '5/minute')

# Prometheus Metrics Configuration
REQUEST_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.075,
    0.1,
    0.25,
    0.5,
    0.75,
    1.0,
    2.5,
    5.0,
    10.0,
)
