"""Connection parameter models. Read-only; no business logic."""

from pydantic import BaseModel, ConfigDict, Field


class ConnectionParams(BaseModel):
    """Effective connection parameters after override → store → default resolution."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    timeout: float = Field(..., ge=0, description="Total connect budget (seconds)")
    name: str = Field(default="", description="Database to authenticate against")
    authenticate: bool = False
    user: str = ""
    pwd: str = Field(default="", repr=False)
    strict_auth: bool = True

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"
