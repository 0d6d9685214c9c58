"""
Pydantic model for validating the download transport configuration.

The values come from the `[transport]` section of the settings file and
from command-line overrides. Validating them here means a bad value is
reported as a configuration error before any file is touched.
"""

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..application.exceptions import ConfigurationError

_MIB = 1024 * 1024


class TransportOptions(BaseModel):
    """
    Tuning knobs of the batch downloader.

    `split` and `min_split_size` control segmented downloads of a single
    file; `max_connections_per_server` caps how many of those segments run
    at once. `continue_partial` resumes leftover `.part` files.
    `auto_file_renaming` must stay off: a file saved under another name is
    never seen by verification, so the hour would be fetched on every run.
    """

    max_concurrent_downloads: int = Field(default=24, ge=1, le=256)
    max_connections_per_server: int = Field(default=8, ge=1, le=16)
    split: int = Field(default=8, ge=1, le=64)
    min_split_size: int = Field(default=_MIB, ge=_MIB)
    continue_partial: bool = True
    auto_file_renaming: bool = False
    timeout: float = Field(default=60.0, gt=0)
    chunk_size: int = Field(default=65536, ge=1024)
    user_agent: str = "archive-sync/0.1.0"

    @field_validator("auto_file_renaming")
    @classmethod
    def _overwrite_in_place(cls, value: bool) -> bool:
        if value:
            raise ValueError(
                "auto_file_renaming is not supported; downloads always "
                "replace the file at its expected path"
            )
        return value

    @classmethod
    def from_settings(cls, values, **overrides) -> "TransportOptions":
        """
        Builds validated options from a settings mapping.

        Raises:
            ConfigurationError: If any value is out of range.
        """

        data = {key.lower(): value for key, value in dict(values or {}).items()}
        data.update(
            {key: value for key, value in overrides.items() if value is not None}
        )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid transport settings: {e}") from e
