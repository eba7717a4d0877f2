"""
CLI for the Nexus studio.

Examples:
  python -m nexus_studio.cli intents --org-type Investor
  python -m nexus_studio.cli preview -i market_entry -i deal_negotiation
  python -m nexus_studio.cli route "Find recent news on tariffs"
  python -m nexus_studio.cli chat --org-type SME --region "West Africa" --industry agritech
"""

from __future__ import annotations

import argparse
import json
import sys

from .agents.inquire_session import InquireSession
from .agents.responders import AgentResponder
from .catalog import PHASE_ORDER, load_catalogs
from .composition import resolve
from .config import StudioConfig, configure_logging
from .errors import StudioError
from .routing import AGENT_STATUS, classify
from .schemas.studio_params import OrgContext


def print_header():
    print("""
╔═══════════════════════════════════════════════════════════════╗
║                                                               ║
║     NEXUS INTELLIGENCE SYSTEM - Design Studio                 ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝
    """)


def cmd_intents(args, catalogs) -> int:
    for intent in catalogs.intents.list_all():
        marker = "*" if args.org_type and intent.is_aligned_with(args.org_type) else " "
        print(f"{marker} {intent.id:<26} {intent.title}")
        print(f"    {intent.description}")
    if args.org_type:
        print(f"\n* suggested for {args.org_type}")
    return 0


def cmd_preview(args, catalogs) -> int:
    composition = resolve(args.intent or [], catalogs)
    if args.json:
        print(json.dumps(composition.to_dict(catalogs), indent=2))
        return 0

    print(f"Active engines: {composition.count}")
    for phase in PHASE_ORDER:
        modules = composition.by_phase[phase]
        print(f"\n{phase.label} Phase")
        if not modules:
            print("  (none)")
        for module_id in modules:
            print(f"  - {catalogs.modules.display_name(module_id)}")
    return 0


def cmd_route(args, catalogs) -> int:
    tag = classify(args.text)
    print(f"{tag.value}: {AGENT_STATUS[tag]}")
    return 0


def cmd_chat(args, config: StudioConfig) -> int:
    context = OrgContext(
        organization_type=args.org_type or "",
        region=args.region or "",
        industry=args.industry or [],
    )
    responder = AgentResponder(settings=config)

    def show_status(agent, status):
        if agent:
            print(f"  PROCESSING [{agent.value}]: {status}")

    session = InquireSession(responder, context=context, on_status=show_status)
    print(session.transcript.messages[0].text)
    print("Type 'quit' to exit.\n")

    try:
        while True:
            try:
                text = input("> ").strip()
            except EOFError:
                break
            if text.lower() in ("quit", "exit"):
                break
            if not text:
                continue
            try:
                message = session.submit(text)
            except StudioError as e:
                print(f"  {e}")
                continue
            if message is None:
                break
            label = f"AGENT: {message.agent_tag.value.upper()}\n" if message.agent_tag else ""
            print(f"\n{label}{message.text}")
            for source in message.display_sources():
                print(f"  SRC: {source.title} <{source.uri}>")
            print()
    finally:
        session.close()
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Nexus design studio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--catalog-dir", default=None, help="Directory holding the catalog JSON files")
    parser.add_argument("--log-level", default=None, help="Logging level (default: NEXUS_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_intents = sub.add_parser("intents", help="List strategic intents")
    p_intents.add_argument("--org-type", default="", help="Mark intents suggested for this organization type")

    p_preview = sub.add_parser("preview", help="Show the engines activated by a set of intents")
    p_preview.add_argument("--intent", "-i", action="append", help="Intent id (repeatable)")
    p_preview.add_argument("--json", action="store_true", help="Print JSON")

    p_route = sub.add_parser("route", help="Show which agent would handle a request")
    p_route.add_argument("text")

    p_chat = sub.add_parser("chat", help="Interactive co-pilot chat")
    p_chat.add_argument("--org-type", default="")
    p_chat.add_argument("--region", default="")
    p_chat.add_argument("--industry", action="append", help="Industry tag (repeatable)")

    args = parser.parse_args(argv)

    config = StudioConfig.from_env()
    configure_logging(args.log_level or config.log_level)

    try:
        catalogs = load_catalogs(args.catalog_dir or config.catalog_dir)
    except StudioError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "intents":
        return cmd_intents(args, catalogs)
    if args.command == "preview":
        return cmd_preview(args, catalogs)
    if args.command == "route":
        return cmd_route(args, catalogs)

    print_header()
    return cmd_chat(args, config)


if __name__ == "__main__":
    sys.exit(main())
