"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema   → application.yaml
    DatabaseSchema      → database.yaml
    LoggingSchema       → logging.yaml
    FeaturesSchema      → features.yaml
    SecuritySchema      → security.yaml
    ObservabilitySchema → observability.yaml
    ConcurrencySchema   → concurrency.yaml
    StorageSchema       → storage.yaml
    AiSchema            → ai.yaml
    ClientSchema        → client.yaml
"""

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    database: int
    external_api: int
    background: int


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool
    echo_pool: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_detailed_errors: bool
    api_request_logging: bool
    ai_model_enabled: bool
    ai_preload_on_startup: bool
    attachments_enabled: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_minutes: int
    audience: str


class SecuritySchema(_StrictBase):
    jwt: JwtSchema


# =============================================================================
# observability.yaml
# =============================================================================


class HealthChecksSchema(_StrictBase):
    ready_timeout_seconds: int


class ObservabilitySchema(_StrictBase):
    health_checks: HealthChecksSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class ThreadPoolSchema(_StrictBase):
    max_workers: int


class SemaphoresSchema(_StrictBase):
    storage: int
    llm: int


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema
    semaphores: SemaphoresSchema


# =============================================================================
# storage.yaml
# =============================================================================


class StorageSchema(_StrictBase):
    root_path: str
    bucket: str
    public_base_url: str
    max_upload_bytes: int
    allowed_content_prefixes: list[str]


# =============================================================================
# ai.yaml
# =============================================================================


class GenerationSchema(_StrictBase):
    max_new_tokens: int
    temperature: float
    top_p: float
    repetition_penalty: float


class AiSchema(_StrictBase):
    model: str
    task: str
    system_prompt: str
    generation: GenerationSchema
    summary_min_chars: int


# =============================================================================
# client.yaml
# =============================================================================


class ClientSchema(_StrictBase):
    autosave_delay_seconds: float
    recent_notes_limit: int
    preview_chars: int
    theme_file: str
