"""
visits 컬렉션 마이그레이션 실행 스크립트

사용법:
    python backend/scripts/migrate_visits.py [--apply] [--batch-size=500]

주의: 기본은 dry run이며, --apply를 지정해야 실제로 문서가 수정됩니다.
역지오코딩은 Nominatim 제한(초당 1회)을 따르므로 문서가 많으면 오래 걸릴 수 있습니다.
"""

import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))

from backend.visit_migration.cli import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
