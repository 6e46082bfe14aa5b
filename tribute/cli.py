"""
Tribute CLI - Command-line interface for the duel engine.

Usage:
    tribute new [--seed N] [--output state.json]    Deal a new duel
    tribute act <state.json> --side S --kind K ...   Apply one action to a saved duel
    tribute cards [--category C] [--search TEXT]     List catalog cards
    tribute serve [--host H] [--port P]              Run the HTTP API
"""

import argparse
import json
import logging
import os
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tribute - Trading Card Duel Engine",
        prog="tribute",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("TRIBUTE_LOG_LEVEL", "WARNING"),
        help="Logging level (default: TRIBUTE_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # New duel
    new_parser = subparsers.add_parser("new", help="Deal a new duel")
    new_parser.add_argument("--seed", type=int, help="Seed for reproducible decks")
    new_parser.add_argument("--output", "-o", help="Write the full duel state to this file")
    new_parser.add_argument("--player1", default="Player 1", help="Name for player1")
    new_parser.add_argument("--player2", default="AI Duelist", help="Name for player2")

    # Apply an action to a saved duel
    act_parser = subparsers.add_parser("act", help="Apply one action to a saved duel")
    act_parser.add_argument("state_file", help="Duel state written by 'new' or 'act'")
    act_parser.add_argument("--side", required=True, choices=["player1", "player2"])
    act_parser.add_argument("--kind", required=True, help="Action kind, e.g. advance_phase")
    act_parser.add_argument("--card", help="Hand card or attacker instance id")
    act_parser.add_argument("--target", help="Target instance id")
    act_parser.add_argument("--stance", help="attack or defense")

    # Catalog listing
    cards_parser = subparsers.add_parser("cards", help="List catalog cards")
    cards_parser.add_argument("--category", choices=["creature", "effect", "trap"])
    cards_parser.add_argument("--search", help="Filter by name or description")

    # HTTP API
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "new":
        return cmd_new(args)
    elif args.command == "act":
        return cmd_act(args)
    elif args.command == "cards":
        return cmd_cards(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_new(args):
    """Deal a new duel and print its summary."""
    from .engine_core import DuelEngine, Side, create_duel

    state = create_duel(
        seed=args.seed,
        names={Side.PLAYER_1: args.player1, Side.PLAYER_2: args.player2},
    )
    engine = DuelEngine(state=state)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, indent=2)

    print(json.dumps(engine.summary().to_dict(), indent=2))
    return 0


def cmd_act(args):
    """Load a saved duel, apply one action, save it back."""
    from .engine_core import DuelEngine

    try:
        with open(args.state_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"Error: File not found: {args.state_file}")
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.state_file}: {e}")
        sys.exit(1)

    if not isinstance(data, dict):
        print(f"Error: {args.state_file} does not hold a duel state object")
        sys.exit(1)

    try:
        engine = DuelEngine(state=data)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = engine.process_action({
        "side": args.side,
        "kind": args.kind,
        "card_id": args.card,
        "target_instance_id": args.target,
        "stance": args.stance,
    })
    print(json.dumps(result.to_dict(), indent=2))

    if result.success:
        with open(args.state_file, "w", encoding="utf-8") as f:
            json.dump(engine.get_state().to_dict(), f, indent=2)
        return 0
    return 2


def cmd_cards(args):
    """List catalog cards."""
    from .catalog import CardCategory, default_catalog

    catalog = default_catalog()
    cards = catalog.search(args.search) if args.search else list(catalog.cards)
    if args.category:
        cards = [c for c in cards if c.category == CardCategory(args.category)]

    for card in cards:
        if card.is_creature:
            stats = f"Lv{card.level} {card.attack}/{card.defense}"
        else:
            stats = card.category.value
        print(f"{card.id:32} {card.name:32} {stats}")
    print(f"\n{len(cards)} card(s)")
    return 0


def cmd_serve(args):
    """Run the HTTP API under uvicorn."""
    import uvicorn

    uvicorn.run("tribute.api.app:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
