"""visits 컬렉션 일괄 마이그레이션 실행기"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from pymongo.errors import PyMongoError

from ..core.config import settings
from ..schemas.reports import MigrationReport, VerificationResult
from ..schemas.visits import FieldEdit
from .enrichment import AddressEnricher
from .visit_store import VisitRepository, VisitUpdateError
from .visits import MissingCreatedAtError, is_fully_migrated, normalize_fields, validate_visit

logger = logging.getLogger(__name__)


def chunked(items: list[Any], size: int) -> Iterator[list[Any]]:
    if size <= 0:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start:start + size]


class VisitMigration:
    """
    fetch → 문서별 검증/수정 계산 → 배치 적용 → 검증 순서로 진행

    배치는 진행 상황 출력 단위일 뿐 트랜잭션이 아니다. 중간에 실패해도
    이전 배치에서 적용된 수정은 그대로 남는다.
    """

    def __init__(
        self,
        repository: VisitRepository,
        enricher: AddressEnricher,
        dry_run: bool = True,
        batch_size: int | None = None,
        verify_sample_size: int | None = None,
        on_fetched: Callable[[list[dict]], None] | None = None,
    ) -> None:
        self.repository = repository
        self.enricher = enricher
        self.dry_run = dry_run
        self.batch_size = batch_size or settings.migration_batch_size
        self.verify_sample_size = verify_sample_size if verify_sample_size is not None else settings.verify_sample_size
        self.on_fetched = on_fetched
        self.report = MigrationReport(dry_run=dry_run)

    async def plan_visit(self, doc: dict) -> list[FieldEdit] | None:
        """문서 하나에 필요한 수정 목록 계산. 검증 실패 시 None"""
        stats = self.report.stats
        doc_id = doc.get("_id")

        violations = validate_visit(doc)
        if violations:
            logger.warning("Document %s has validation errors: %s", doc_id, violations)
            stats.errors += 1
            return None

        try:
            edits = normalize_fields(doc)
        except MissingCreatedAtError as exc:
            logger.warning("%s", exc)
            stats.errors += 1
            return None

        enrichment = await self.enricher.enrich(doc)
        if enrichment.failed:
            stats.geocoding_errors += 1
        if enrichment.geocoded:
            stats.geocoded += 1
        edits.extend(enrichment.edits)
        return edits

    async def _apply(self, doc_id: Any, edits: list[FieldEdit]) -> None:
        stats = self.report.stats
        if self.dry_run:
            stats.updated += 1
            return
        try:
            await self.repository.apply_edits(doc_id, edits)
        except (PyMongoError, VisitUpdateError) as exc:
            logger.error("Error updating document %s: %s", doc_id, exc)
            stats.errors += 1
            return
        stats.updated += 1

    async def verify(self) -> VerificationResult:
        """적용 후 일부 문서를 다시 읽어 목표 스키마를 만족하는지 확인"""
        limit = min(self.verify_sample_size, self.report.stats.updated)
        docs = await self.repository.sample(limit)
        return VerificationResult(
            verified=sum(1 for doc in docs if is_fully_migrated(doc)),
            checked=limit,
        )

    async def run(self) -> MigrationReport:
        stats = self.report.stats
        mode = "DRY RUN (no changes will be made)" if self.dry_run else "LIVE (changes will be applied)"
        logger.info("Starting migration... mode=%s, batch size=%d", mode, self.batch_size)

        docs = await self.repository.fetch_all()
        stats.total = len(docs)
        logger.info("Found %d visit documents", stats.total)
        if not docs:
            return self.report

        if self.on_fetched:
            self.on_fetched(docs)

        pending: list[tuple[Any, list[FieldEdit]]] = []
        for doc in docs:
            edits = await self.plan_visit(doc)
            stats.processed += 1
            if edits is None:
                continue
            if edits:
                pending.append((doc["_id"], edits))
            else:
                stats.skipped += 1

        batches = list(chunked(pending, self.batch_size))
        logger.info("Processing %d batch(es)...", len(batches))
        done = 0
        for index, batch in enumerate(batches, 1):
            logger.info("Processing batch %d/%d (%d documents)...", index, len(batches), len(batch))
            for doc_id, edits in batch:
                await self._apply(doc_id, edits)
            done += len(batch)
            logger.info("  Progress: %d/%d (%.1f%%)", done, len(pending), done / len(pending) * 100)

        if not self.dry_run and stats.updated > 0:
            logger.info("Verifying updates...")
            self.report.verification = await self.verify()

        return self.report
