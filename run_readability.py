# run_readability.py
import argparse
import json
import sys
from pathlib import Path

from loguru import logger

# Make the repo root importable (same as the other runners)
repo_root = Path(__file__).resolve().parent
if str(repo_root) not in sys.path:
    sys.path.append(str(repo_root))

from services.readability.config_loader import get_profile_options, list_available_profiles
from services.readability.document import Document


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract the main article from an HTML file.")
    parser.add_argument("path", help="HTML file to read, or '-' for stdin.")
    parser.add_argument(
        "--profile",
        default="default",
        help=f"Option profile from configs/readability.yaml ({', '.join(list_available_profiles())}).",
    )
    parser.add_argument("--images", action="store_true", help="Also select article images (may probe URLs).")
    parser.add_argument("--debug", action="store_true", help="Log scoring and cleaning decisions.")
    return parser


def main() -> None:
    args = build_parser().parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.debug else "INFO")

    if args.path == "-":
        raw = sys.stdin.buffer.read()
    else:
        raw = Path(args.path).read_bytes()

    options = get_profile_options(args.profile, debug=args.debug)
    doc = Document(raw, options)
    logger.info(f"Parsed {args.path} (encoding={doc.encoding}, candidates={len(doc.candidates)})")

    summary = {
        "title": doc.title,
        "author": doc.author,
        "content": doc.content,
    }
    if args.images:
        summary["images"] = doc.images

    print(json.dumps(summary, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
