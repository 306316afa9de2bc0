from __future__ import annotations

from pydantic import BaseModel, Field


class MigrationStats(BaseModel):
    total: int = 0
    processed: int = 0
    updated: int = 0
    skipped: int = 0  # 이미 마이그레이션된 문서
    errors: int = 0  # 검증 실패 + 저장 실패
    geocoded: int = 0
    geocoding_errors: int = 0


class VerificationResult(BaseModel):
    verified: int = 0
    checked: int = 0


class MigrationReport(BaseModel):
    dry_run: bool = True
    stats: MigrationStats = Field(default_factory=MigrationStats)
    verification: VerificationResult | None = None
