"""
metadep/dependencies/report.py - Pydantic diagnostics models

Structured, validated snapshot of a registry for debugging output.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class TimingEntry(BaseModel):
    """Accumulated dispatch time for one component."""

    component: str = Field(..., description="Responsible component label")
    duration_ms: float = Field(..., ge=0.0, description="Accumulated time in milliseconds")


class EdgeEntry(BaseModel):
    """A single upstream -> downstream dependency."""

    upstream: str
    downstream: str


class RegistryReport(BaseModel):
    """Diagnostic snapshot of a MetadataDependencyRegistry."""

    edge_count: int = Field(..., ge=0)
    identifier_count: int = Field(..., ge=0)
    primary_consumer: Optional[str] = Field(
        None, description="Component kind of the primary consumer, if registered"
    )
    observers: List[str] = Field(default_factory=list, description="Observer component kinds")
    trace_level: int = Field(default=0, ge=0)
    depth: int = Field(default=0, ge=0, description="Current notification nesting depth")
    max_depth: Optional[int] = Field(None, ge=1)
    notification_count: int = Field(default=0, ge=0)
    timings: List[TimingEntry] = Field(default_factory=list)
    edges: List[EdgeEntry] = Field(
        default_factory=list, description="Only populated when edges are requested"
    )
