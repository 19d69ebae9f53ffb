"""Public configuration and reporting models for wsdldoc."""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class AcquisitionOptions(BaseModel):
    """How documents and external schemas are read."""
    timeout: float = Field(30.0, gt=0, description="Seconds to wait for an HTTP response")
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra HTTP request headers")
    follow_redirects: bool = True
    load_external_schemas: bool = Field(
        True,
        description="Load xs:include/xs:import schemaLocation targets relative to the base path",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


class CacheCounters(BaseModel):
    """Hit/miss/size counters of one memo cache."""
    hits: int
    misses: int
    size: int

    model_config = ConfigDict(frozen=True)


class CacheInfo(BaseModel):
    """Memoization counters of a document's resolution and definition caches."""
    resolution: CacheCounters
    definitions: CacheCounters

    model_config = ConfigDict(frozen=True)
