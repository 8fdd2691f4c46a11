import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Admin dashboard access
    ADMIN_RBAC_ENABLED: bool = os.getenv("ADMIN_RBAC_ENABLED", "true").lower() == "true"
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    # Storage: "memory" keeps everything in-process (reset on restart), "redis" persists JSON documents
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "memory").lower()
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    RQ_QUEUE_NAME: str = os.getenv("RQ_QUEUE_NAME", "portal")
    REGISTRY_LOCK_TTL_MS: int = int(os.getenv("REGISTRY_LOCK_TTL_MS", "5000"))

    # Intake rules
    MIN_APPLICANT_AGE: int = int(os.getenv("MIN_APPLICANT_AGE", "18"))

    # Temporary block window (whole days, inclusive bounds)
    BLOCK_MIN_DAYS: int = int(os.getenv("BLOCK_MIN_DAYS", "1"))
    BLOCK_MAX_DAYS: int = int(os.getenv("BLOCK_MAX_DAYS", "3"))

    # Review decision callback
    # Modes:
    # - "off": never notify
    # - "sync": POST inline from the review request
    # - "rq": enqueue on RQ_QUEUE_NAME, the worker retries on failure
    # - "hybrid": try inline first, enqueue as backup
    DECISION_CALLBACK_URL: str = os.getenv("DECISION_CALLBACK_URL", "")
    DECISION_CALLBACK_MODE: str = os.getenv("DECISION_CALLBACK_MODE", "sync").lower()
    CALLBACK_TIMEOUT_SEC: int = int(os.getenv("CALLBACK_TIMEOUT_SEC", "5"))
    CALLBACK_MAX_ATTEMPTS: int = int(os.getenv("CALLBACK_MAX_ATTEMPTS", "5"))
    CALLBACK_RETRY_INTERVAL_SEC: int = int(os.getenv("CALLBACK_RETRY_INTERVAL_SEC", "30"))

    # Privacy
    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"

    # Load the sample users/applications on startup (memory backend demos)
    SEED_DEMO_DATA: bool = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"

settings = Settings()
