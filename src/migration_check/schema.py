from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel


class EncodingViolationDTO(BaseModel):
    path: str
    declaration: str
    field: str
    expected: str


class DriftViolationDTO(BaseModel):
    type_name: str
    old_digest: str
    new_digest: str
    chains: List[str] = []
    cycles: int = 0
    chains_truncated: bool = False


class ParseFailureDTO(BaseModel):
    path: str
    stage: str
    error: str


class CheckReportDTO(BaseModel):
    status: Literal["passed", "drift", "encoding", "removed", "fatal"]
    exit_code: int
    source_dir: str
    baseline_path: str
    baseline_written: bool = False
    update: bool = False
    encoding_violations: List[EncodingViolationDTO] = []
    drift_violations: List[DriftViolationDTO] = []
    added_types: List[str] = []
    removed_types: List[str] = []
    parse_failures: List[ParseFailureDTO] = []
    warnings: List[str] = []
    fingerprints: Dict[str, str] = {}
    error: Optional[str] = None
