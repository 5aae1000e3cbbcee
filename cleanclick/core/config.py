import warnings
from typing import Annotated, Any, Literal

from pydantic import (
    AnyUrl,
    BeforeValidator,
    computed_field,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from typing_extensions import Self

from cleanclick.core.secrets_manager import secrets


class SecretManagerSource(PydanticBaseSettingsSource):
    """Settings source backed by the encrypted YAML config."""

    def get_field_value(
        self, field: Any, field_name: str
    ) -> tuple[Any, str, bool]:
        return secrets.all_values.get(field_name), field_name, False

    def prepare_field_value(
        self, field_name: str, field: Any, value: Any, value_is_complex: bool
    ) -> Any:
        return value

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in secrets.all_values.items()
            if name in self.settings_cls.model_fields
        }


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    if isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            SecretManagerSource(settings_cls),
            file_secret_settings,
        )

    PROJECT_NAME: str = "CleanClick"
    API_V1_STR: str = "/api"
    FRONTEND_HOST: str = "http://localhost:3000"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Supabase configuration (hosted store and identity provider)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""

    # Storage: "auto" uses Supabase when configured, else the JSON file
    STORAGE_BACKEND: Literal["auto", "supabase", "sql", "json"] = "auto"
    DATABASE_URL: str = "sqlite:///data/cleanclick.db"
    JSON_DB_PATH: str = "data/db.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def storage_backend(self) -> str:
        if self.STORAGE_BACKEND != "auto":
            return self.STORAGE_BACKEND
        return "supabase" if self.supabase_enabled else "json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_enabled(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_KEY)

    # Business rules
    BUSINESS_TIMEZONE: str = "UTC"
    DEFAULT_PRICING_STRATEGY: Literal["formula", "flat_table"] = "formula"
    ENFORCE_SCHEDULE_ON_BOOKING: bool = True

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("SUPABASE_SERVICE_KEY", self.SUPABASE_SERVICE_KEY)
        if self.STORAGE_BACKEND == "supabase" and not self.supabase_enabled:
            raise ValueError(
                "STORAGE_BACKEND is 'supabase' but SUPABASE_URL or "
                "SUPABASE_SERVICE_KEY is missing"
            )
        return self


settings = Settings()  # type: ignore
