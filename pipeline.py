"""
Hansom Nuri shipping pipeline
=============================

Four stages around one job record:

    1. start_job            original order export -> JobState
    2. export_aggregate     item aggregation workbook
       export_cj_uploads    per-item CJ upload workbooks (zip)
    3. merge_reply_files    CJ replies -> tracking numbers in the job rows
    4. export_final         original export with tracking columns
       export_unmatched     replies without a matching order

Every stage takes the current JobState and, when it changes something,
returns a new one. The pipeline saves it to the JobStore; the core
functions never touch the store.

Quick Start:
    ```python
    pipeline = ShippingPipeline()
    job = pipeline.start_job("orders.xlsx")
    pipeline.export_aggregate(job)
    pipeline.export_cj_uploads(job)
    job, result, _ = pipeline.merge_reply_files(job, ["reply1.xlsx", "reply2.xlsx"])
    pipeline.export_final(job)
    pipeline.export_unmatched(result)
    ```
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from builders.aggregate_builder import build_aggregate_rows, total_quantity
from builders.upload_builder import build_cj_groups
from config import JOB_STORE_PATH, OUTPUT_DIR
from exceptions import DuplicateUploadError, JobNotFoundError
from exporters import AggregateExporter, CjUploadExporter, TrackingExporter, UnmatchedExporter
from loaders.order_loader import OrderSheetLoader, check_original_columns
from matchers.reply_matcher import ensure_no_collisions, merge_replies
from matchers.tracking_matcher import apply_tracking
from models import FileFingerprint, JobState, ReconciliationResult
from store.job_store import JobStore


class ShippingPipeline:
    """Stage runner that owns persistence of the job record."""

    def __init__(self, job_store: JobStore = None, output_dir: Path = OUTPUT_DIR):
        self.job_store = job_store or JobStore(JOB_STORE_PATH)
        self.output_dir = Path(output_dir)

    # ----------------------
    # Job lifecycle
    # ----------------------
    def current_job(self) -> JobState:
        job = self.job_store.load()
        if job is None:
            raise JobNotFoundError("원본 엑셀을 먼저 업로드하세요. (No original upload saved)")
        return job

    def reset(self) -> None:
        self.job_store.clear()
        print("🧹 Job cleared")

    # ----------------------
    # Stage 1
    # ----------------------
    def start_job(self, original_path: Path) -> JobState:
        """
        Read the original order export and replace the saved job with it.

        Raises:
            WorksheetNotFoundError / UnreadableFileError: Bad workbook
        """
        original_path = Path(original_path)
        loader = OrderSheetLoader(original_path)
        headers, rows = loader.read_table()
        check_original_columns(headers, original_path.name)

        job = JobState(
            created_at=datetime.now().isoformat(),
            original_file_name=original_path.name,
            original_headers=headers,
            original_rows=rows,
            uploaded_reply_files=[],
        )
        self.job_store.save(job)
        print(f"📥 Loaded {len(rows)} rows from {original_path.name}")
        return job

    # ----------------------
    # Stage 2
    # ----------------------
    def export_aggregate(self, job: JobState) -> Path:
        aggregate_rows = build_aggregate_rows(job.original_rows, job.original_headers)
        return AggregateExporter(aggregate_rows).export(self.output_dir)

    def export_cj_uploads(self, job: JobState, on_progress=None) -> Path:
        groups = build_cj_groups(job.original_headers, job.original_rows)
        return CjUploadExporter(groups).export(self.output_dir, on_progress)

    # ----------------------
    # Stage 3
    # ----------------------
    @staticmethod
    def filter_new_files(job: JobState, paths: Sequence[Path]) -> Tuple[List[Path], List[FileFingerprint], List[str]]:
        """
        Drop reply files already merged (or selected twice) by fingerprint.

        Returns:
            (accepted paths, their fingerprints, duplicate file names)
        """
        existing = list(job.uploaded_reply_files)
        accepted: List[Path] = []
        fingerprints: List[FileFingerprint] = []
        dup_names: List[str] = []

        for p in paths:
            p = Path(p)
            fp = FileFingerprint.from_path(p)
            if fp in existing or fp in fingerprints:
                dup_names.append(p.name)
                continue
            fingerprints.append(fp)
            accepted.append(p)

        return accepted, fingerprints, dup_names

    def merge_reply_files(
        self, job: JobState, paths: Sequence[Path]
    ) -> Tuple[JobState, ReconciliationResult, List[str]]:
        """
        Merge CJ reply files into the job.

        Collect phase: read and merge every accepted file, then check for
        cross-file collisions. Commit phase (only if that check passes):
        apply tracking numbers and save the new job.

        Returns:
            (new job, reconciliation result, duplicate file names skipped)

        Raises:
            DuplicateUploadError: Every selected file was already merged
            ReplyCollisionError: An order number came back in several files
        """
        accepted, fingerprints, dup_names = self.filter_new_files(job, paths)
        if not accepted:
            raise DuplicateUploadError(dup_names)
        if dup_names:
            logging.warning(f"[reply] already uploaded, excluded: {', '.join(dup_names)}")
            print(f"⚠️ 일부 회신 파일은 이미 업로드되어 제외했습니다: {', '.join(dup_names)}")

        # collect
        sources = [OrderSheetLoader(p).read_reply() for p in accepted]
        merged = merge_replies(sources)
        ensure_no_collisions(merged)

        # commit
        result = apply_tracking(job.original_headers, job.original_rows, merged.mapping)
        new_job = job.replace(
            original_headers=result.updated_headers,
            original_rows=result.updated_rows,
            uploaded_reply_files=list(job.uploaded_reply_files) + fingerprints,
        )
        self.job_store.save(new_job)

        print(
            f"✅ Tracking applied: {result.matched_count}/{result.total_reply_count} order numbers matched, "
            f"{len(result.unmatched)} unmatched, {len(result.duplicates)} duplicate keys"
        )
        for skipped in merged.skipped:
            print(f"⚠️ Skipped {skipped.file_name}: {skipped.reason}")
        return new_job, result, dup_names

    # ----------------------
    # Stage 4
    # ----------------------
    def export_final(self, job: JobState) -> Path:
        return TrackingExporter(job.original_headers, job.original_rows).export(self.output_dir)

    def export_unmatched(self, result: ReconciliationResult) -> Path:
        return UnmatchedExporter(result.unmatched).export(self.output_dir)

    # ----------------------
    # Summary
    # ----------------------
    @staticmethod
    def summarize(job: Optional[JobState]) -> dict:
        if job is None:
            return {}
        return {
            "original_file_name": job.original_file_name,
            "created_at": job.created_at,
            "rows": len(job.original_rows),
            "columns": len(job.original_headers),
            "items": len(build_aggregate_rows(job.original_rows, job.original_headers)),
            "total_quantity": total_quantity(job.original_headers, job.original_rows),
            "reply_files": [fp.name for fp in job.uploaded_reply_files],
        }
