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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./vault.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", False))

    # Custody principal holding all escrowed value
    VAULT_ADDRESS = data.get("VAULT_ADDRESS", "subscription_vault")

    # Token (asset) service; empty URL selects the in-memory ledger
    TOKEN_SERVICE_URL = data.get("TOKEN_SERVICE_URL", "")
    TOKEN_SERVICE_TIMEOUT = float(data.get("TOKEN_SERVICE_TIMEOUT", 10.0))

    # Lifecycle events are always logged; also POSTed here when set
    EVENT_WEBHOOK_URL = data.get("EVENT_WEBHOOK_URL", None)

    # Billing sweep worker
    BILLING_SWEEP_ENABLED = bool(data.get("BILLING_SWEEP_ENABLED", True))
    BILLING_SWEEP_INTERVAL_SECONDS = data.get("BILLING_SWEEP_INTERVAL_SECONDS", 300)
    BILLING_SWEEP_BATCH_SIZE = data.get("BILLING_SWEEP_BATCH_SIZE", 50)
