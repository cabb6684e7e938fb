"""CLI entry point for the Support Triage agent.

Runs tickets through the same LangGraph workflow as the API and prints the
execution timeline. For the web UI and HTTP API, use the FastAPI server
(support_triage/server.py).

Usage:
    python -m support_triage.main "My invoice is wrong"         # one ticket
    python -m support_triage.main --mode optimized "..."        # optimized mode
    python -m support_triage.main                               # interactive loop
    python -m support_triage.main --debug                       # show debug logs
"""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from support_triage.agent import TriageResult, create_triage_agent, run_triage
from support_triage.config import DEFAULT_TICKET_ID

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool = False) -> None:
    """Set up logging: WARNING by default, DEBUG when --debug is passed."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )
    logging.getLogger("support_triage").setLevel(logging.DEBUG if debug else logging.WARNING)


def format_result(result: TriageResult) -> str:
    """Render a triage result as terminal text."""
    lines = [
        f"Ticket:          {result['ticket_id']}",
        f"Classification:  {result['classification'] or '(unknown)'}",
        "Human review:    " + ("yes" if result["requires_human"] else "no (auto-resolve)"),
        f"Mode:            {result['mode']}",
        f"Total latency:   {result['total_duration_ms']} ms",
        "",
        "Execution timeline:",
    ]
    for idx, step in enumerate(result["steps"], start=1):
        tag = " [DSPy]" if step["kind"] == "dspy" else ""
        lines.append(f"  {idx}. {step['name']}{tag} ({step['duration_ms']} ms)")
        lines.append(f"     {step['detail']}")
    lines += ["", "Answer:", result["answer"]]
    return "\n".join(lines)


def _interactive(agent, ticket_id: str, mode: str) -> None:
    print("\n" + "=" * 60)
    print("  Support Triage Agent - CLI")
    print("=" * 60)
    print("  Paste a ticket and press Enter.")
    print("  Commands: 'quit' to exit, 'mode' to toggle base/optimized.")
    print("=" * 60 + "\n")

    while True:
        try:
            ticket_text = input(f"Ticket [{mode}]: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nGoodbye!")
            break

        if not ticket_text:
            continue

        if ticket_text.lower() in ("exit", "quit", "q"):
            print("\nGoodbye!")
            break

        if ticket_text.lower() == "mode":
            mode = "optimized" if mode == "base" else "base"
            print(f"\n>> Mode is now: {mode}\n")
            continue

        try:
            result = run_triage(agent, ticket_text, ticket_id=ticket_id, mode=mode)
            print("\n" + format_result(result) + "\n")
        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break
        except Exception as e:
            logger.exception("Error triaging ticket")
            print(f"\nSomething went wrong: {e}\n")


def main(argv: list[str] | None = None) -> None:
    """Run one ticket from the command line, or the interactive loop."""
    parser = argparse.ArgumentParser(description="Support Triage Agent CLI")
    parser.add_argument("ticket_text", nargs="?", help="Ticket text; omit for interactive mode")
    parser.add_argument("--mode", choices=("base", "optimized"), default="base")
    parser.add_argument("--ticket-id", default=DEFAULT_TICKET_ID)
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including per-node metrics",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    _configure_logging(debug=args.debug)

    agent = create_triage_agent()

    if args.ticket_text:
        result = run_triage(agent, args.ticket_text, ticket_id=args.ticket_id, mode=args.mode)
        print(format_result(result))
        return

    _interactive(agent, args.ticket_id, args.mode)


if __name__ == "__main__":
    main()
