from pydantic import BaseModel


class InfluencerSummary(BaseModel):
    id: int
    username: str | None = None


class ErrorResponse(BaseModel):
    error: str
