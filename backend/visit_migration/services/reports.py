from __future__ import annotations

import json

from ..schemas.reports import MigrationReport
from .visits import to_json_document

SUMMARY_ROWS = (
    ("Total documents", "total"),
    ("Processed", "processed"),
    ("Updated", "updated"),
    ("Skipped (already migrated)", "skipped"),
    ("Errors", "errors"),
    ("Addresses geocoded", "geocoded"),
    ("Geocoding errors", "geocoding_errors"),
)


def format_summary(report: MigrationReport) -> str:
    stats = report.stats
    width = max(len(label) for label, _ in SUMMARY_ROWS)
    lines = ["Migration completed!", "Statistics:"]
    lines += [f"  {label:<{width}}  {getattr(stats, field)}" for label, field in SUMMARY_ROWS]

    if report.dry_run:
        lines += ["", "This was a DRY RUN. No changes were made.", "Run with --apply to apply changes."]
    elif report.verification is not None:
        verification = report.verification
        lines += ["", f"Verified {verification.verified}/{verification.checked} sample documents"]
    return "\n".join(lines)


def format_documents_json(docs: list[dict]) -> str:
    payload = json.dumps([to_json_document(doc) for doc in docs], indent=2, ensure_ascii=False, default=str)
    return "\n".join(["=== DATABASE DOCUMENTS (JSON) ===", payload, "=== END DATABASE DOCUMENTS ==="])
