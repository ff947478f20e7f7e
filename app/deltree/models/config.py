"""Deletion configuration model and builder.

A DeletionConfig is created once (directly or through
DeletionConfigBuilder) and is immutable afterwards, so a single
configuration can be shared by any number of concurrent callers.
"""

from datetime import timedelta
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class DeletionConfig(BaseModel):
    """Immutable settings for a DeletionEngine.

    Attributes:
        max_retries: Retry passes after the first attempt (0 = single attempt).
        wait_between_retries: Base delay in seconds before a retry pass.
        backoff_multiplier: Geometric multiplier applied per retry index when > 1.0.
        retry_overriding_file_attributes: Repair permissions and retry a failed delete.
        override_all_attributes: Grant every permission bit instead of owner-write only.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[
        int,
        Field(ge=0, description="Retry passes after the first attempt"),
    ] = 0
    wait_between_retries: Annotated[
        float,
        Field(ge=0.0, description="Base delay in seconds between passes"),
    ] = 0.0
    backoff_multiplier: Annotated[
        float,
        Field(ge=1.0, description="Multiplier applied to the delay per retry"),
    ] = 1.0
    retry_overriding_file_attributes: Annotated[
        bool,
        Field(description="Make entries writable and retry when a delete fails"),
    ] = False
    override_all_attributes: Annotated[
        bool,
        Field(description="Set all permission bits when repairing"),
    ] = False

    @classmethod
    def builder(cls) -> "DeletionConfigBuilder":
        """Create a builder pre-populated with default values."""
        return DeletionConfigBuilder()

    @property
    def max_attempts(self) -> int:
        """Total number of passes, including the first attempt."""
        return self.max_retries + 1

    def wait_for_retry(self, retry_index: int) -> float:
        """Get the delay in seconds before retry number ``retry_index + 1``.

        Args:
            retry_index: Zero-based index of the pass that just failed.

        Returns:
            ``wait_between_retries * backoff_multiplier ** retry_index`` when
            the multiplier is above 1.0, otherwise the flat base delay.
        """
        if self.backoff_multiplier > 1.0:
            try:
                return self.wait_between_retries * self.backoff_multiplier**retry_index
            except OverflowError:
                return float("inf")
        return self.wait_between_retries


class DeletionConfigBuilder:
    """Fluent builder producing an immutable DeletionConfig.

    Values are validated when build() is called.

    Example:
        config = (
            DeletionConfig.builder()
            .max_retries(3)
            .wait_between_retries(0.1)
            .backoff_multiplier(2.0)
            .build()
        )
    """

    def __init__(self) -> None:
        self._max_retries = 0
        self._wait_between_retries = 0.0
        self._backoff_multiplier = 1.0
        self._retry_overriding_file_attributes = False
        self._override_all_attributes = False

    def max_retries(self, value: int) -> "DeletionConfigBuilder":
        """Set the number of retries; 0 disables retrying."""
        self._max_retries = value
        return self

    def wait_between_retries(self, value: float | timedelta) -> "DeletionConfigBuilder":
        """Set the base delay between passes, in seconds or as a timedelta."""
        if isinstance(value, timedelta):
            value = value.total_seconds()
        self._wait_between_retries = value
        return self

    def backoff_multiplier(self, value: float) -> "DeletionConfigBuilder":
        """Set the backoff multiplier; 1.0 keeps a flat delay."""
        self._backoff_multiplier = value
        return self

    def retry_overriding_file_attributes(self, value: bool = True) -> "DeletionConfigBuilder":
        """Enable making entries and their parents writable on failure."""
        self._retry_overriding_file_attributes = value
        return self

    def override_all_attributes(self, value: bool = True) -> "DeletionConfigBuilder":
        """Grant all permission bits instead of only owner-write."""
        self._override_all_attributes = value
        return self

    def build(self) -> DeletionConfig:
        """Build the immutable configuration.

        Raises:
            pydantic.ValidationError: If any value is out of range.
        """
        return DeletionConfig(
            max_retries=self._max_retries,
            wait_between_retries=self._wait_between_retries,
            backoff_multiplier=self._backoff_multiplier,
            retry_overriding_file_attributes=self._retry_overriding_file_attributes,
            override_all_attributes=self._override_all_attributes,
        )


DEFAULT_CONFIG = DeletionConfig()
