from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 4242

    ARG_URL_KEY: str = Field(
        default="q",
        description="Repeated query parameter carrying the argument list of an RPC call"
    )

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="text", description="text or json")

    DOWNLOAD_DELAY: float = Field(
        default=2.0,
        description="Seconds a simulated layer download takes"
    )
    UPLOAD_DELAY: float = 1.0

    RELAY_STDIN: bool = Field(
        default=False,
        description="Copy the caller's input into the container process instead of closing it"
    )
    COPY_CHUNK_SIZE: int = 32 * 1024

    model_config = SettingsConfigDict(
        env_prefix="DOCKERD_",
        env_file=".env",
        extra="ignore",
    )
