"""
Run one AI action from the terminal and print the normalized result as JSON.
Usage: python -m careerai.scripts.run_action find_jobs --payload '{"resume_text": "...", "query": "data analyst"}'
       python -m careerai.scripts.run_action generate_lesson --payload '{"skill": "SQL"}' --api-url http://localhost:8000
"""
import argparse
import json
import sys

from careerai.core.actions import Action
from careerai.core.errors import DispatchError
from careerai.logging_config import setup_logging
from careerai.services.action_client import HttpDispatcher
from careerai.services.dispatcher import dispatch
from careerai.services.normalizer import normalize


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dispatch one CareerAI action and print the normalized result.")
    parser.add_argument("action", choices=[a.value for a in Action])
    parser.add_argument("--payload", default="{}", help="JSON object with the action's fields")
    parser.add_argument("--api-url", default=None, help="Send through a running API instead of calling the provider directly")
    parser.add_argument("--raw", action="store_true", help="Print the provider text without normalizing")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("WARNING")
    try:
        payload = json.loads(args.payload)
    except ValueError as e:
        print(f"Invalid --payload JSON: {e}", file=sys.stderr)
        return 2

    action = Action(args.action)
    remote = HttpDispatcher(args.api_url) if args.api_url else None
    try:
        raw = (remote if remote is not None else dispatch)(action, payload)
    except DispatchError as e:
        print(json.dumps(e.to_body()), file=sys.stderr)
        return 1
    finally:
        if remote is not None:
            remote.close()

    if args.raw:
        print(raw)
        return 0
    result = normalize(action, raw)
    out = {"result": result.to_jsonable(), "shape": result.shape.value}
    if result.fallback:
        out["fallback"] = result.fallback.value
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
