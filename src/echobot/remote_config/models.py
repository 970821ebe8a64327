from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RemoteSettings(BaseModel):
    """Mutable settings pulled from the remote configuration service.

    ``endpoint_url`` and ``model`` fall back to the provider preset when
    left unset.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    provider: str = Field(default="anyscale", description="OpenAI-compatible provider preset")
    endpoint_url: str | None = Field(default=None, description="Completion endpoint base URL")
    model: str | None = Field(default=None, description="Model identifier sent with each request")
    api_key: str = Field(default="", repr=False, description="Bearer key for the completion endpoint")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    free_message_quota: int = Field(default=10, ge=0, description="Messages allowed without a subscription")
    budget: int = Field(default=1500, gt=0, description="Window budget, in size_strategy units")
    size_strategy: Literal["words", "tokens"] = Field(default="words")
