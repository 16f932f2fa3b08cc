from functools import lru_cache

from pydantic_settings import BaseSettings


class AgreementSettings(BaseSettings):
    route_prefix: str = "/agreement"
    swag_path: str = "/_swag.json"
    source_path: str = "/_agreement.mjs"
    log_level: str = "INFO"
    json_logs: bool = True

    class Config:
        env_prefix = "AGREEMENT_"


@lru_cache()
def get_settings() -> AgreementSettings:
    """Process-wide settings, read from the environment once."""
    return AgreementSettings()
