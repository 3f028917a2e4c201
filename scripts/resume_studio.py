#!/usr/bin/env python3
"""
Resume Studio command line client.

Drives the generation workflow against a running generation API: loads a
resume (text or PDF) and a job description, generates the tailored resume
and/or cover letter, and optionally exports PDFs. When Supabase and MongoDB
are configured, history is kept per signed-in user.

Usage:
    python scripts/resume_studio.py generate --resume cv.pdf --job jd.txt --kind both --pdf out/
    python scripts/resume_studio.py history
    python scripts/resume_studio.py history --clear
    python scripts/resume_studio.py login --provider github
    python scripts/resume_studio.py logout
"""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv
load_dotenv()

from src.common.config import Config
from src.common.logger import set_global_debug_mode, setup_logging
from src.common.repositories import get_history_repository
from src.common.types import ArtifactKind
from src.workflow.auth import SupabaseAuthProvider
from src.workflow.history_store import HistoryStore
from src.workflow.session_manager import SessionManager
from src.workflow.state import Notice, NoticeLevel
from src.workflow.workflow import GenerationWorkflow

logger = logging.getLogger(__name__)


def print_notice(notice: Notice) -> None:
    marker = "✓" if notice.level is NoticeLevel.SUCCESS else "✗"
    print(f"{marker} {notice.message}", file=sys.stderr)


def build_history_store() -> HistoryStore:
    repository = None
    if Config.MONGODB_URI:
        repository = get_history_repository()
    return HistoryStore(repository=repository)


async def open_session(workflow: GenerationWorkflow) -> Optional[SessionManager]:
    """Start a session when an auth provider is configured; anonymous otherwise."""
    if not (Config.SUPABASE_URL and Config.SUPABASE_ANON_KEY):
        return None
    manager = SessionManager(SupabaseAuthProvider.from_config(), workflow.on_session_change)
    await manager.start()
    return manager


async def cmd_generate(args: argparse.Namespace, workflow: GenerationWorkflow) -> int:
    resume_path = Path(args.resume)
    content_type, _ = mimetypes.guess_type(resume_path.name)
    if not await workflow.upload_resume(resume_path.name, resume_path.read_bytes(), content_type):
        return 1

    workflow.set_inputs(job_description=Path(args.job).read_text(encoding="utf-8"))

    kinds = list(ArtifactKind) if args.kind == "both" else [ArtifactKind(args.kind)]
    results = await asyncio.gather(*(workflow.submit(kind) for kind in kinds))

    exit_code = 0
    for kind, ok in zip(kinds, results):
        if not ok:
            exit_code = 1
            continue
        if not args.quiet:
            print(f"===== {kind.label.upper()} =====")
            print(workflow.result(kind))
            print()
        if args.pdf:
            workflow.set_active_tab(kind)
            if await workflow.download_pdf(args.pdf) is None:
                exit_code = 1

    await workflow.drain()
    return exit_code


async def cmd_history(args: argparse.Namespace, workflow: GenerationWorkflow) -> int:
    if not workflow.session.is_authenticated:
        print("Not signed in: history is only kept for the current run.", file=sys.stderr)

    if args.clear:
        return 0 if await workflow.clear_history() else 1

    for entry in workflow.history:
        created = entry.created_at.strftime("%Y-%m-%d %H:%M")
        preview = entry.output_text.strip().splitlines()[0][:60] if entry.output_text.strip() else ""
        print(f"{created}  {entry.kind.value:<6}  {entry.id}  {preview}")
    return 0


async def cmd_login(args: argparse.Namespace, manager: Optional[SessionManager]) -> int:
    if manager is None:
        print("SUPABASE_URL and SUPABASE_ANON_KEY must be set to sign in.", file=sys.stderr)
        return 1
    url = await manager.sign_in(args.provider)
    print(f"Open this URL to sign in:\n{url}")
    return 0


async def cmd_logout(manager: Optional[SessionManager]) -> int:
    if manager is None:
        return 0
    await manager.sign_out()
    print("Logged out")
    return 0


async def run(args: argparse.Namespace) -> int:
    workflow = GenerationWorkflow(history_store=build_history_store(), on_notice=print_notice)
    manager = await open_session(workflow)
    try:
        if args.command == "generate":
            return await cmd_generate(args, workflow)
        if args.command == "history":
            return await cmd_history(args, workflow)
        if args.command == "login":
            return await cmd_login(args, manager)
        if args.command == "logout":
            return await cmd_logout(manager)
        return 2
    finally:
        if manager is not None:
            await manager.stop()
        await workflow.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI resume and cover letter builder")
    parser.add_argument("--log-level", default=Config.LOG_LEVEL, help="Logging level")
    parser.add_argument("--debug", action="store_true", help="Verbose workflow logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a tailored resume and/or cover letter")
    generate.add_argument("--resume", required=True, help="Resume file (.txt or .pdf)")
    generate.add_argument("--job", required=True, help="Job description text file")
    generate.add_argument("--kind", choices=["resume", "cover", "both"], default="resume")
    generate.add_argument("--pdf", metavar="DIR", help="Also export PDFs into DIR")
    generate.add_argument("--quiet", action="store_true", help="Do not print results")

    history = subparsers.add_parser("history", help="List generation history")
    history.add_argument("--clear", action="store_true", help="Delete all history for this user")

    login = subparsers.add_parser("login", help="Sign in with an OAuth provider")
    login.add_argument("--provider", default=Config.OAUTH_PROVIDER)

    subparsers.add_parser("logout", help="Sign out")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        set_global_debug_mode(True)
    setup_logging(level=args.log_level, format=Config.LOG_FORMAT)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
