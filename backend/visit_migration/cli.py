"""
visits 컬렉션 마이그레이션 스크립트

1. 중복 필드 `added_at` 제거 (`created_at`과 동일)
2. 기존 방문에 `visited_at` 추가 (`created_at` 값 사용)
3. `planned` 필드를 false로 추가
4. 주소에 없는 county/region, country를 역지오코딩으로 채움 (1 req/sec)

사용법:
    python -m backend.visit_migration.cli [--apply] [--batch-size=500] [--yes]
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .core.config import settings
from .db.mongo import MigrationSetupError, MongoConnectionManager
from .services.enrichment import AddressEnricher
from .services.geocoding import NominatimClient
from .services.migration import VisitMigration
from .services.reports import format_documents_json, format_summary
from .services.visit_store import VisitRepository

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migrate visit documents to the current schema")
    parser.add_argument("--apply", action="store_true", help="변경 사항을 실제로 저장 (기본값: dry run)")
    parser.add_argument("--batch-size", type=_positive_int, default=settings.migration_batch_size)
    parser.add_argument("--mongodb-uri", default=None, help="MONGODB_URI 환경 변수 대신 사용")
    parser.add_argument("--db", default=None, help="데이터베이스 이름")
    parser.add_argument("--dump-json", action="store_true", help="조회한 문서를 JSON으로 출력")
    parser.add_argument("--yes", action="store_true", help="--apply 확인 질문 생략")
    return parser


def confirm(prompt: str = "This will modify visit documents. Continue? (yes/no): ") -> bool:
    answer = input(prompt).strip().lower()
    return answer in ("yes", "y")


async def run_migration(args: argparse.Namespace) -> int:
    dry_run = not args.apply

    try:
        await MongoConnectionManager.check_connection()
    except MigrationSetupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        await MongoConnectionManager.close()
        return 1

    if not dry_run and not args.yes and not confirm():
        print("Migration cancelled.")
        await MongoConnectionManager.close()
        return 0

    geocoder = NominatimClient()
    migration = VisitMigration(
        repository=VisitRepository(MongoConnectionManager.get_visits_collection()),
        enricher=AddressEnricher(geocoder),
        dry_run=dry_run,
        batch_size=args.batch_size,
        on_fetched=(lambda docs: print(format_documents_json(docs))) if args.dump_json else None,
    )
    try:
        report = await migration.run()
    except Exception:
        logger.exception("Migration failed")
        return 1
    finally:
        await geocoder.close()
        await MongoConnectionManager.close()

    print()
    print(format_summary(report))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    if args.mongodb_uri:
        settings.mongodb_uri = args.mongodb_uri
    if args.db:
        settings.mongodb_db = args.db

    return asyncio.run(run_migration(args))


if __name__ == "__main__":
    raise SystemExit(main())
