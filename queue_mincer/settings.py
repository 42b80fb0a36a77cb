import json
from typing import Any, Literal, TypeAlias

import yaml
from anystore.exceptions import DoesNotExist
from anystore.io import smart_read
from anystore.types import Uri
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from queue_mincer.exceptions import ImproperlyConfigured

QueueMode: TypeAlias = Literal["cached", "passthrough"]


class QueueSettings(BaseModel):
    """
    Queue and loader configuration. Field names are accepted in snake_case and
    camelCase, so a `queue` section of a `config.json` like this loads as is:

    ```json
    {"loader": "csv", "inMemory": true, "itemTemplate": {"task": "string"}}
    ```
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    loader: str = "json"
    """Loader discriminator: memory, json, csv or googleSheet"""
    mode: QueueMode = "passthrough"
    """`cached`: load once, never write back. `passthrough`: always hit the store"""
    put: bool | None = None
    """Explicit write permission, required by the memory loader"""
    item_template: dict[str, str] | None = None
    """Field name -> kind (string, number, boolean, object, array)"""
    templates_uri: str = "templates"
    """Directory holding `{templateId}.json` / `{templateId}.csv` files"""
    credentials_uri: str = "credentials.json"
    """Credentials for the spreadsheet loader"""
    spreadsheet_id: str | None = None
    """Overrides `spreadsheetId` from the credentials file"""
    active: str | None = None
    """Template (file stem or sheet title) the queue operates on"""

    @model_validator(mode="before")
    @classmethod
    def ensure_mode(cls, data: Any) -> Any:
        if isinstance(data, dict) and "mode" not in data:
            for key in ("inMemory", "in_memory"):
                if key in data:
                    value = data[key]
                    if isinstance(value, str):
                        value = value.lower() in ("1", "true", "yes", "on")
                    data = {**data, "mode": "cached" if value else "passthrough"}
                    break
        return data

    @field_validator("item_template", mode="before")
    @classmethod
    def ensure_item_template(cls, value: Any) -> Any:
        if isinstance(value, str):
            return json.loads(value)
        return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="queue_mincer_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    debug: bool = False
    log_level: str = "info"
    config_uri: str | None = None
    queue: QueueSettings = QueueSettings()


def load_config(uri: Uri) -> QueueSettings:
    """
    Load the queue configuration from a yaml (or json) file. If the document
    has a `queue` section, only this is used.

    Raises:
        ImproperlyConfigured: If the file doesn't exist or is not a mapping
    """
    try:
        data = yaml.safe_load(smart_read(uri, "r")) or {}
    except (DoesNotExist, FileNotFoundError) as e:
        raise ImproperlyConfigured(f"Config file not found: `{uri}`") from e
    if not isinstance(data, dict):
        raise ImproperlyConfigured(f"Invalid config file: `{uri}`")
    return QueueSettings.model_validate(data.get("queue", data))


def get_settings(config_uri: Uri | None = None) -> Settings:
    """
    Get the runtime settings from environment, optionally patched by the
    queue section of the given (or env configured) config file.
    """
    settings = Settings()
    config_uri = config_uri or settings.config_uri
    if config_uri:
        settings = settings.model_copy(update={"queue": load_config(config_uri)})
    return settings
