"""Pydantic settings for the Concept Map skill and its remote services."""
from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from services.conceptmap.http_session import worst_case_call_seconds


class ConceptMapSettings(BaseSettings):
    """Configuration surface for the ID locator, traversal service, and telemetry."""

    model_config = SettingsConfigDict(
        env_prefix="CONCEPTMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    id_locator_endpoint: str = Field(default="https://conceptmap.cfapps.io/idlocator", min_length=8)
    traversal_endpoint: str = Field(default="https://conceptmap.cfapps.io/traversal", min_length=8)
    relationship_id: str = Field(
        default="P54",
        min_length=1,
        description="Property queried for every claims request; spoken relationships are not mapped yet.",
    )
    lookup_language: str = Field(default="en", min_length=2)

    http_timeout_seconds: float = Field(default=1.8, gt=0, description="Timeout for each attempt of a remote call.")
    http_max_retries: int = Field(default=1, ge=0, le=5)
    http_retry_backoff: float = Field(default=0.2, ge=0)
    response_budget_seconds: float = Field(
        default=8.0,
        gt=0,
        description="Platform response deadline; both remote calls must fit inside it.",
    )

    card_title: str = Field(default="Concept Map", min_length=1)
    log_level: str = Field(default="INFO")

    mqtt_host: Optional[str] = Field(default=None, description="Telemetry broker; telemetry is off when unset.")
    mqtt_port: int = Field(default=1883, gt=0, le=65535)
    mqtt_username: Optional[str] = None
    mqtt_password: Optional[str] = None
    mqtt_base_topic: str = Field(default="conceptmap", min_length=1)

    def worst_case_handler_seconds(self) -> float:
        return 2 * worst_case_call_seconds(
            self.http_timeout_seconds, self.http_max_retries, self.http_retry_backoff
        )

    @model_validator(mode="after")
    def _fit_response_budget(self) -> "ConceptMapSettings":
        worst_case = self.worst_case_handler_seconds()
        if worst_case > self.response_budget_seconds:
            raise ValueError(
                f"HTTP timeout and retries allow {worst_case:.2f}s for the two remote calls, "
                f"over the {self.response_budget_seconds:.2f}s response budget"
            )
        return self


__all__ = ["ConceptMapSettings"]
