# stitch/config/env_validator.py
# Which environment variable each AI provider reads its credentials from

import os
from typing import Optional

PROVIDER_ENV_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
}


def env_var_for(provider: str) -> Optional[str]:
    return PROVIDER_ENV_VARS.get(provider)


# * True when the provider needs no key or its key is set to a non-blank value
def provider_env_ready(provider: str) -> bool:
    var_name = env_var_for(provider)
    if var_name is None:
        return True
    return bool(os.environ.get(var_name, "").strip())


def missing_env_message(provider: str) -> str:
    var_name = env_var_for(provider)
    if var_name is None:
        return f"Provider '{provider}' does not require an API key."
    return f"Missing {var_name} in environment or .env"
