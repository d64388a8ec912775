"""Data contracts passed between dispatcher stages."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PluginTarget(BaseModel):
    """A validated pin and the executable that handles it."""

    pin: str = Field(..., description="Validated pin identifier")
    cmd_dir: str = Field(..., description="Base plugin command directory")
    path: str = Field(..., description="Plugin executable path")


class PluginInvocation(BaseModel):
    """Everything a launcher needs to hand the JWE over to a plugin."""

    target: PluginTarget
    argv: List[str]
    payload: bytes = Field(..., description="Canonical JWE document")

    @property
    def executable(self) -> str:
        return self.target.path
