from pydantic import BaseModel, ConfigDict, Field


class ExplainRequest(BaseModel):
    """Request body for streaming a plain-language sentence explanation."""

    sentence_content: str = Field(..., min_length=1, max_length=4000)
    document_title: str | None = Field(default=None, max_length=255)

    model_config = ConfigDict(extra="forbid")
