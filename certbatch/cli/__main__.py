from __future__ import annotations

import argparse
import getpass
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv

from certbatch.config.loader import ConfigError, load_config
from certbatch.excel.reader import DecodeError
from certbatch.logging.error_log import AuditLogBuffer
from certbatch.logging.init import enable_debug, log_summary, setup_logging
from certbatch.models.batch_result import RenderStatsAccumulator
from certbatch.models.candidate import CandidateStatus
from certbatch.models.config_models import AppConfig
from certbatch.render.certificate import CertificateRenderer
from certbatch.services.batch import count_certificates, run_batch, summarize_batch
from certbatch.services.export import write_batch_export
from certbatch.services.gate import AccessDenied, check_admin_password
from certbatch.services.ingest import IngestResult, ingest_file, record_audit
from certbatch.services.manual import ManualEntryError, build_manual_candidate
from certbatch.services.progress import ProgressTracker
from certbatch.services.summary import render_ingest_line, render_stats_line, render_summary_line
from certbatch.services.validator import format_error_preview

"""CLI entrypoint.

Subcommands:
- check FILE : decode + validate + build, print the preview and accepted count
- run FILE   : check, then generate certificates and the batch export
- single     : one certificate from command-line values
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv (CERTBATCH_ADMIN_PASSWORD 等)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="certbatch", description="Training certificate batch generator")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help="Config file (default: config/certbatch.yml)")
    p.add_argument("--password", default=None, help="Admin password (prompted when required and omitted)")
    sub = p.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate a candidate file without generating certificates")
    check.add_argument("file", type=Path)

    run = sub.add_parser("run", help="Generate certificates for every candidate in a file")
    run.add_argument("file", type=Path)
    run.add_argument("--out", type=Path, default=None, help="Output directory")
    run.add_argument("--delay", type=float, default=None, help="Pause in seconds after each certificate")
    run.add_argument("--no-export", action="store_true", help="Skip the JSON batch export")

    single = sub.add_parser("single", help="Generate one certificate from manual entry")
    single.add_argument("--name", required=True)
    single.add_argument("--email", required=True)
    single.add_argument("--course", required=True)
    single.add_argument("--out", type=Path, default=None, help="Output directory")
    return p.parse_args(argv)


def _authorize(cfg: AppConfig, supplied: str | None, logger: logging.Logger) -> bool:
    if cfg.admin_password and supplied is None and sys.stdin.isatty():
        supplied = getpass.getpass("Admin password: ")
    try:
        check_admin_password(supplied, cfg.admin_password)
    except AccessDenied as e:
        logger.error(f"auth: {e}")
        return False
    return True


def _ingest(path: Path, cfg: AppConfig, audit: AuditLogBuffer, logger: logging.Logger) -> IngestResult | None:
    try:
        result = ingest_file(path)
    except DecodeError as e:
        logger.error(f"decode: {e}")
        return None
    record_audit(audit, result)

    logger.info(
        render_ingest_line(result.source, result.raw_row_count, result.accepted_count, len(result.errors))
    )
    if result.errors:
        preview = format_error_preview(result.errors, cfg.batch.error_preview_limit)
        for line in preview.splitlines():
            logger.warning(line)
    return result


def _flush_audit(audit: AuditLogBuffer, logger: logging.Logger) -> None:
    try:
        fp = audit.flush()
    except OSError as e:
        logger.warning(f"audit log flush failed: {e}")
        return
    if fp is not None:
        logger.info(f"audit log: {fp}")


def _cmd_check(args: argparse.Namespace, cfg: AppConfig, logger: logging.Logger) -> int:
    audit = AuditLogBuffer(cfg.logs_directory)
    result = _ingest(args.file, cfg, audit, logger)
    _flush_audit(audit, logger)
    if result is None:
        return EXIT_FATAL
    for c in result.candidates:
        courses = ", ".join(course.display_name for course in c.courses)
        logger.info(f"  {c.id} {c.name} <{c.email}>: {courses}")
    if not result.candidates:
        logger.error("No valid candidates found. Please check your file format.")
        return EXIT_FATAL
    logger.info(f"Successfully loaded {result.accepted_count} candidates")
    return EXIT_PARTIAL_FAILURE if result.errors else EXIT_SUCCESS_ALL


def _cmd_run(args: argparse.Namespace, cfg: AppConfig, logger: logging.Logger) -> int:
    audit = AuditLogBuffer(cfg.logs_directory)
    result = _ingest(args.file, cfg, audit, logger)
    if result is None:
        _flush_audit(audit, logger)
        return EXIT_FATAL
    if not result.candidates:
        logger.error("No valid candidates found. Please check your file format.")
        _flush_audit(audit, logger)
        return EXIT_FATAL

    out_dir = args.out or cfg.output_directory
    delay = cfg.batch.delay_seconds if args.delay is None else max(args.delay, 0.0)
    renderer = CertificateRenderer(out_dir, cfg.certificate)
    stats = RenderStatsAccumulator()

    logger.info(f"Generating certificates into: {out_dir}")
    start_time = datetime.now(UTC)
    with ProgressTracker(count_certificates(result.candidates)) as progress:
        final = run_batch(
            result.candidates,
            renderer,
            on_progress=progress,
            delay_seconds=delay,
            audit=audit,
            stats=stats,
            source=result.source,
        )
    end_time = datetime.now(UTC)

    if not args.no_export:
        try:
            write_batch_export(final, out_dir)
        except OSError as e:
            logger.error(f"export: {e}")
    _flush_audit(audit, logger)

    batch_result = summarize_batch(final, start_time, end_time, stats)
    logger.info(render_stats_line(batch_result))
    summary_line = render_summary_line(batch_result)
    log_summary(summary_line[len("SUMMARY "):])

    if batch_result.has_failures or result.errors:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _cmd_single(args: argparse.Namespace, cfg: AppConfig, logger: logging.Logger) -> int:
    try:
        candidate, course = build_manual_candidate(args.name, args.email, args.course)
    except ManualEntryError as e:
        for field, message in e.errors.items():
            logger.error(f"{field}: {message}")
        return EXIT_FATAL

    renderer = CertificateRenderer(args.out or cfg.output_directory, cfg.certificate)
    final = run_batch([candidate], renderer)
    if final[0].status is not CandidateStatus.COMPLETED:
        return EXIT_FATAL
    logger.info(f"certificate written: {renderer.written[-1]}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        enable_debug(logger)
        logger.debug("debug mode enabled")

    if not _authorize(cfg, args.password, logger):
        return EXIT_FATAL

    if args.command == "check":
        return _cmd_check(args, cfg, logger)
    if args.command == "run":
        return _cmd_run(args, cfg, logger)
    return _cmd_single(args, cfg, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
