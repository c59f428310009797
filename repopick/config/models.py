from pydantic import BaseModel, Field
from typing import Literal


class VCSConfig(BaseModel):
    provider: Literal["github"] = "github"
    token_env: str = "GITHUB_PERSONAL_ACCESS_TOKEN"
    repo_type: Literal["all", "owner", "public", "private", "member"] = "owner"
    max_repos: int = Field(default=100, ge=1)
    timeout: int = Field(default=30, ge=1)


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(default=8085, ge=1, le=65535)
    debug: bool = False


class OutputConfig(BaseModel):
    include_header: bool = True


class RepopickConfig(BaseModel):
    vcs: VCSConfig = Field(default_factory=VCSConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
