from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Origin of the execution context ("scheme://host[:port]"); empty means nothing is same-origin.
    current_origin: str = Field("", validation_alias="CURRENT_ORIGIN")

    xsrf_cookie_name: str = Field("XSRF-TOKEN", validation_alias="XSRF_COOKIE_NAME")
    xsrf_header_name: str = Field("X-XSRF-TOKEN", validation_alias="XSRF_HEADER_NAME")

    default_timeout_ms: int = Field(0, validation_alias="DEFAULT_TIMEOUT_MS")
    follow_redirects: bool = Field(True, validation_alias="FOLLOW_REDIRECTS")
    user_agent: str = Field("", validation_alias="USER_AGENT")

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
