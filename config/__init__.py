"""Settings selection.

`APP_ENV` picks one of the modules below (default: development). Each
module reads its secrets from the environment (`.env` is loaded by
`create_app`): `DB_*`, `API_SECRET` for check-in clients, `CRON_SECRET` for
the auto-checkout scheduler, `DEFAULT_TIMEZONE` (America/Mexico_City) and
`VALIDATE_RATE_LIMIT`.
"""

import os

_MODULES = {
    "dev": "config.development",
    "development": "config.development",
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _MODULES.get(env, "config.development")
