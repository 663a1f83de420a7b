"""Configuration for the CLI tool."""

from pydantic import BaseModel, Field


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(default="localhost", description="Server host")
    port: int = Field(default=8000, description="Server port")
    api_path: str = Field(
        default="/api/chat", description="API path for the chat endpoint"
    )
    timeout_seconds: float = Field(
        default=90.0, description="HTTP timeout for one chat request"
    )

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}{self.api_path}"
