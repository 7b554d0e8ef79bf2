"""Resolver configuration schema."""

from pydantic import BaseModel
from pydantic import Field


class ResolverConfig(BaseModel):
    """Options for a Resolver instance.

    All fields are optional; unset values fall back to the environment
    (see ``paths.get_niagara_home``) or to the stated defaults.
    """

    niagara_home: str | None = Field(None, description="Installation root containing modules/*.jar")
    retain_temp: bool = Field(False, description="Keep extracted files after the resolver is closed")
    temp_parent: str | None = Field(None, description="Directory to create the extraction workspace in")
