"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "FlowPatch"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    # Upper bound on concurrent workflow fetches in batch reads
    batch_read_concurrency: int = 4
    # Connection types projected into the transport edge list
    edge_connection_types: list[str] = ["main"]

    model_config = {"env_prefix": "FLOWPATCH_"}


settings = Settings()
