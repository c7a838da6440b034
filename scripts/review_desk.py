"""ReviewDesk interactive console.

Usage:
    python scripts/review_desk.py
    python scripts/review_desk.py --code 2424
    python scripts/review_desk.py --storage memory --no-persist-session
"""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import shlex
import sys
from pathlib import Path

# Ensure project root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import get_settings
from src.core.logging import get_logger, setup_logging
from src.core.types import (
    DishStyle,
    PhotoStyle,
    PostTopic,
    ReplyLanguage,
    ReplyTone,
    ReviewFilter,
    ReviewSource,
)
from src.desk.controller import OperationResult, ReviewDeskController

log = get_logger(__name__)

HELP = """\
Commands:
  login CODE                     sign in with an access code
  logout                         sign out (saved data is kept)
  list [pending|replied|all]     show reviews (default: pending)
  add SOURCE AUTHOR RATING TEXT  add a review manually
  import TEXT                    extract a review from pasted text (AI)
  sync                           fetch a demo review
  reply ID [TONE] [LANG]         draft a reply (AI, 1 credit)
  done ID REPLY                  mark a review as replied
  reopen ID                      move a replied review back to pending
  identity VISION VALUES HISTORY save the brand identity
  usage                          show monthly credits
  photo PATH STYLE [OUT]         enhance a dish photo (AI, 1 credit)
  profile                        Google profile suggestions (AI, 1 credit)
  dish NAME [INGREDIENTS] [STYLE] menu description (AI, 1 credit)
  post TOPIC DETAILS             Google post (AI, 1 credit)
  qna                            Google Q&A suggestions (AI, 1 credit)
  help | quit
"""


def _print_result(result: OperationResult) -> None:
    marker = "ok" if result.ok else "!!"
    if result.message:
        print(f"[{marker}] {result.message}")
    for warning in result.warnings:
        print(f"[warn] {warning}")


def _print_reviews(result: OperationResult) -> None:
    _print_result(result)
    if not result.ok:
        return
    for review in result.data:
        stars = "*" * review.rating
        print(f"  {review.review_id}  {review.source.value:<12} {stars:<5} {review.author} ({review.date})")
        print(f"      {review.text}")
        if review.reply:
            print(f"      -> {review.reply}")


async def _dispatch(controller: ReviewDeskController, argv: list[str]) -> bool:
    """Run one command. Returns False when the loop should stop."""
    command, args = argv[0].lower(), argv[1:]

    if command in ("quit", "exit"):
        return False
    if command == "help":
        print(HELP)
    elif command == "login" and args:
        _print_result(controller.login(args[0]))
    elif command == "logout":
        _print_result(controller.logout())
    elif command == "list":
        predicate = ReviewFilter(args[0]) if args else ReviewFilter.PENDING
        _print_reviews(controller.list_reviews(predicate))
    elif command == "add" and len(args) >= 4:
        result = controller.add_review(
            text=" ".join(args[3:]),
            source=ReviewSource(args[0]),
            author=args[1],
            rating=int(args[2]),
        )
        _print_result(result)
    elif command == "import" and args:
        result = await controller.smart_import(" ".join(args))
        _print_result(result)
        if not result.ok and isinstance(result.data, dict):
            print(f"  raw text kept: {result.data['raw_text']}")
    elif command == "sync":
        _print_result(controller.simulate_sync())
    elif command == "reply" and args:
        tone = ReplyTone(args[1]) if len(args) > 1 else ReplyTone.FORMAL
        language = ReplyLanguage(args[2]) if len(args) > 2 else ReplyLanguage.IT
        result = await controller.generate_reply(args[0], tone, language)
        _print_result(result)
        if result.ok:
            print(f"\n{result.data}\n")
    elif command == "done" and len(args) >= 2:
        _print_result(controller.mark_replied(args[0], " ".join(args[1:])))
    elif command == "reopen" and args:
        _print_result(controller.reopen(args[0]))
    elif command == "identity" and len(args) == 3:
        _print_result(controller.save_identity(*args))
    elif command == "usage":
        _print_result(controller.usage())
    elif command == "photo" and len(args) >= 2:
        path = Path(args[0])
        mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        result = await controller.enhance_photo(path.read_bytes(), mime_type, PhotoStyle(args[1]))
        _print_result(result)
        if result.ok:
            out = Path(args[2]) if len(args) > 2 else path.with_name(f"{path.stem}_enhanced.png")
            out.write_bytes(result.data)
            print(f"  saved to {out}")
    elif command == "profile":
        result = await controller.optimize_profile()
        _print_result(result)
        if result.ok:
            print(f"\n{result.data.description}")
            print(f"  keywords: {', '.join(result.data.keywords)}")
            print(f"  categories: {', '.join(result.data.categories)}\n")
    elif command == "dish" and args:
        ingredients = args[1] if len(args) > 1 else ""
        style = DishStyle(args[2]) if len(args) > 2 else DishStyle.RUSTIC
        result = await controller.describe_dish(args[0], ingredients, style)
        _print_result(result)
        if result.ok:
            print(f"\n{result.data}\n")
    elif command == "post" and len(args) >= 2:
        result = await controller.write_google_post(PostTopic(args[0]), " ".join(args[1:]))
        _print_result(result)
        if result.ok:
            print(f"\n{result.data}\n")
    elif command == "qna":
        result = await controller.generate_qna()
        _print_result(result)
        if result.ok:
            for pair in result.data:
                print(f"  Q: {pair.question}\n  A: {pair.answer}")
    else:
        print("Unknown command or missing arguments. Type 'help'.")
    return True


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="ReviewDesk console")
    parser.add_argument("--code", type=str, default=None, help="Access code to sign in with")
    parser.add_argument(
        "--storage",
        type=str,
        choices=["memory", "file", "redis"],
        default=None,
        help="Override STORAGE_BACKEND",
    )
    parser.add_argument(
        "--no-persist-session",
        action="store_true",
        help="Do not remember the signed-in tenant across runs",
    )
    return parser.parse_args()


async def main() -> None:
    """Entry point."""
    args = parse_args()
    settings = get_settings()
    if args.storage:
        settings = settings.model_copy(update={"storage_backend": args.storage})

    setup_logging(level=settings.log_level, json_output=settings.log_json)

    controller = ReviewDeskController.from_settings(
        settings, persistent_session=not args.no_persist_session,
    )

    if args.code:
        _print_result(controller.login(args.code))
    else:
        restored = controller.restore_session()
        if restored.ok:
            _print_result(restored)

    print("ReviewDesk console. Type 'help' for commands.")
    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        try:
            argv = shlex.split(line)
        except ValueError as exc:
            print(f"Cannot parse command: {exc}")
            continue
        if not argv:
            continue
        try:
            if not await _dispatch(controller, argv):
                break
        except (ValueError, OSError) as exc:
            log.warning("console_command_failed", command=argv[0], error=str(exc))
            print(f"Invalid input: {exc}")


if __name__ == "__main__":
    asyncio.run(main())
