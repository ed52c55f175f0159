from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

DEFAULT_PROMPT_LABEL = "Default summarization"


class SummarizeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # blank/missing text is reported by the service as a 400, not a schema error
    text: Optional[str] = None
    custom_prompt: Optional[str] = Field(default=None, alias="customPrompt")


class SummarizeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str
    original_text: str = Field(alias="originalText")
    custom_prompt: str = Field(default=DEFAULT_PROMPT_LABEL, alias="customPrompt")
