# main.py
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

from config import FLAG_DEBUG, JOB_STORE_PATH, OUTPUT_DIR
from pipeline import ShippingPipeline
from store.job_store import JobStore


def run_load(pipeline: ShippingPipeline, args):
    pipeline.start_job(Path(args.original))
    print("👉 Next: python main.py aggregate / python main.py uploads")


def run_aggregate(pipeline: ShippingPipeline, args):
    pipeline.export_aggregate(pipeline.current_job())


def run_uploads(pipeline: ShippingPipeline, args):
    def progress(done: int, total: int):
        logging.debug(f"[cj-upload] {done}/{total}")

    pipeline.export_cj_uploads(pipeline.current_job(), on_progress=progress)
    print("👉 Upload the files to CJ, then: python main.py replies <reply.xlsx> ...")


def run_replies(pipeline: ShippingPipeline, args):
    job = pipeline.current_job()
    _, result, _ = pipeline.merge_reply_files(job, [Path(p) for p in args.replies])
    for d in result.duplicates:
        print(f"⚠️ Duplicate order key in original: {d.key} x{d.count}")
    if result.unmatched:
        pipeline.export_unmatched(result)
    print("👉 Next: python main.py final")


def run_final(pipeline: ShippingPipeline, args):
    pipeline.export_final(pipeline.current_job())


def run_status(pipeline: ShippingPipeline, args):
    summary = pipeline.summarize(pipeline.job_store.load())
    if not summary:
        print("No job saved.")
        return
    print(json.dumps(summary, ensure_ascii=False, indent=2))


def run_reset(pipeline: ShippingPipeline, args):
    pipeline.reset()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Hansom Nuri CJ shipping pipeline")
    ap.add_argument("--store", default=str(JOB_STORE_PATH), help="Job snapshot file")
    ap.add_argument("--output", default=str(OUTPUT_DIR), help="Directory for generated files")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("load", help="Stage 1: read the original order export (starts a new job).")
    s.add_argument("original", help="Path to the original .xlsx")
    s.set_defaults(func=run_load)

    sub.add_parser("aggregate", help="Stage 2: item aggregation workbook.").set_defaults(func=run_aggregate)
    sub.add_parser("uploads", help="Stage 2: per-item CJ upload zip.").set_defaults(func=run_uploads)

    s = sub.add_parser("replies", help="Stage 3: merge CJ reply files into the job.")
    s.add_argument("replies", nargs="+", help="CJ reply .xlsx files")
    s.set_defaults(func=run_replies)

    sub.add_parser("final", help="Stage 4: original export with tracking numbers.").set_defaults(func=run_final)
    sub.add_parser("status", help="Show the saved job.").set_defaults(func=run_status)
    sub.add_parser("reset", help="Clear the saved job.").set_defaults(func=run_reset)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or FLAG_DEBUG) else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    pipeline = ShippingPipeline(JobStore(Path(args.store)), Path(args.output))
    try:
        args.func(pipeline, args)
    except (ValueError, FileNotFoundError) as e:
        # the saved job is untouched; report and stop this action
        logging.error(str(e))
        print(f"❌ {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
