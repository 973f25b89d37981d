"""Comic Studio Backend — Upload authentication response."""

from pydantic import BaseModel, Field


class UploadAuthResponse(BaseModel):
    """Signed parameters the browser sends with a direct ImageKit upload."""
    token: str = Field(description="Single-use upload token")
    expire: int = Field(description="Unix timestamp after which the signature is invalid")
    signature: str = Field(description="HMAC-SHA1 of token + expire, hex encoded")
