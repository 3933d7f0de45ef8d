"""Explicit-content scanning results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Verdict(BaseModel):
    """Explicit / not-explicit classification of one text span."""

    model_config = ConfigDict(frozen=True)

    is_explicit: bool
    reason: str = ""


class ScannedItem(BaseModel):
    """One record flagged during a ``scan_all`` sweep."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    marked: bool = True


class ScanAllResult(BaseModel):
    """Summary of a full catalogue sweep.

    ``scanned`` counts every record swept.  ``results`` lists only the
    records flagged by this run; records that were already explicit are
    counted as scanned but neither re-written nor listed, so an immediate
    re-run reports ``marked_explicit == 0``.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = True
    scanned: int = Field(default=0, ge=0)
    marked_explicit: int = Field(default=0, ge=0)
    results: list[ScannedItem] = Field(default_factory=list)


class ScanSingleResult(BaseModel):
    """Verdict for a single record and whether it was written back."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    is_explicit: bool
    updated: bool
