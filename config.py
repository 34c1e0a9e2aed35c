import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./billing.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./billing.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Billing job queues ("memory" keeps jobs in-process, "redis" shares them with workers)
    QUEUE_BACKEND = data.get("QUEUE_BACKEND", "memory")
    RUN_WORKERS_IN_PROCESS = bool(data.get("RUN_WORKERS_IN_PROCESS", True))
    CONTRACT_BILLING_CONCURRENCY = data.get("CONTRACT_BILLING_CONCURRENCY", 5)
    CONSOLIDATED_BILLING_CONCURRENCY = data.get("CONSOLIDATED_BILLING_CONCURRENCY", 2)
    JOB_MAX_ATTEMPTS = data.get("JOB_MAX_ATTEMPTS", 1)  # 1 = no internal retry
    JOB_BACKOFF_SECONDS = data.get("JOB_BACKOFF_SECONDS", 1)  # Doubles per attempt
    COMPLETED_JOB_RETENTION = data.get("COMPLETED_JOB_RETENTION", 100)  # Jobs kept per queue
    COMPLETED_JOB_TTL_SECONDS = data.get("COMPLETED_JOB_TTL_SECONDS", 3600)
    FAILED_JOB_TTL_SECONDS = data.get("FAILED_JOB_TTL_SECONDS", 86400)
    WORKER_POLL_INTERVAL_SECONDS = data.get("WORKER_POLL_INTERVAL_SECONDS", 1.0)

    # Consolidated billing
    MAX_ACCOUNT_DEPTH = data.get("MAX_ACCOUNT_DEPTH", 5)
