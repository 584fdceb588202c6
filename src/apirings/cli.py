"""Command-line interface for apirings."""

import argparse
import json
import os
import sys

from apirings.models.errors import RegistryError


def _load_registry(args):
    from apirings.config import get_settings
    from apirings.dataset import build_registry

    settings = get_settings()
    if args.dataset:
        settings = settings.model_copy(update={"dataset_path": args.dataset})
    if args.policy:
        settings = settings.model_copy(update={"platform_policy": args.policy})
    return build_registry(settings)


def _export_overrides(args) -> None:
    """Expose global options as APIRINGS_* variables for the server processes."""
    from apirings.config import get_settings

    if args.dataset:
        os.environ["APIRINGS_DATASET_PATH"] = os.path.abspath(os.path.expanduser(args.dataset))
    if args.policy:
        os.environ["APIRINGS_PLATFORM_POLICY"] = args.policy
    get_settings.cache_clear()


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    from apirings.api.app import get_registry, reset_registry

    # Worker and reload processes rebuild the registry from the environment
    _export_overrides(args)
    reset_registry()
    # Fail on a bad dataset before binding the port
    get_registry()

    uvicorn.run(
        "apirings.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        workers=args.workers,
        reload=args.reload,
    )
    return 0


def cmd_list(args):
    """List registered members."""
    registry = _load_registry(args)
    members = registry.members(ring=args.ring, layer=args.layer)

    if args.json:
        print(json.dumps([m.to_dict() for m in members], indent=2))
        return 0

    print(f"\n{len(members)} member(s)")
    print("=" * 60)
    for m in members:
        print(f"  {m.name:<32} {m.ring.value:<10} {m.layer.value}")
    print()
    return 0


def cmd_lookup(args):
    """Show the classification of one member."""
    registry = _load_registry(args)
    member = registry.get_member(args.name)

    if args.json:
        data = member.to_dict()
        data["dependencies"] = registry.dependencies_of(member.name)
        print(json.dumps(data, indent=2))
    else:
        print(f"{member.name}: ring={member.ring.value} layer={member.layer.value}")
        deps = registry.dependencies_of(member.name)
        if deps:
            print(f"  depends on: {', '.join(deps)}")
    return 0


def cmd_access(args):
    """Check whether a member is visible for a ring/layer selection."""
    registry = _load_registry(args)
    accessible = registry.is_accessible(args.name, args.ring, args.layer)

    if args.json:
        print(json.dumps({
            "name": args.name,
            "ring": args.ring,
            "layer": args.layer,
            "accessible": accessible,
        }, indent=2))
    else:
        status = "accessible" if accessible else "NOT accessible"
        print(f"{args.name}: {status}")
    return 0 if accessible else 1


def cmd_closure(args):
    """Print the availability closure of a layer or optional component."""
    registry = _load_registry(args)
    availability = registry.availability_closure(args.target)
    data = availability.to_dict()

    if args.json:
        print(json.dumps(dict(target=args.target, **data), indent=2))
        return 0

    print(f"{args.target} implies:")
    print(f"  layers: {', '.join(data['layers'])}")
    if data["components"]:
        print(f"  components: {', '.join(data['components'])}")
    if data["mediated"]:
        print(f"  mediated platform access: {', '.join(data['mediated'])}")
    return 0


def cmd_check(args):
    """Validate dependency edges against the layering rules."""
    registry = _load_registry(args)

    edges = []
    if args.source and args.target:
        edges.append((args.source, args.target))
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            entries = json.load(f)
        if not isinstance(entries, list):
            raise ValueError(f"{args.file} must hold a JSON list of [source, target] pairs")
        bad = [
            i for i, edge in enumerate(entries)
            if not isinstance(edge, list)
            or len(edge) != 2
            or not all(isinstance(name, str) for name in edge)
        ]
        for i in bad:
            print(f"error: entry {i} is not a [source, target] pair: {entries[i]!r}", file=sys.stderr)
        if bad:
            return 1
        edges.extend((source, target) for source, target in entries)
    if not edges:
        print("No edges to check: give SOURCE TARGET or --file", file=sys.stderr)
        return 2

    violations = registry.check_dependencies(edges)

    if args.json:
        print(json.dumps({
            "checked": len(edges),
            "violations": [v.to_dict() for v in violations],
        }, indent=2))
    else:
        for v in violations:
            print(f"FAIL {v.source} -> {v.target}: {v.reason}")
        print(f"{len(edges)} edge(s) checked, {len(violations)} violation(s)")
    return 1 if violations else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="apirings - Ring and layer classification registry for CPython's API"
    )
    parser.add_argument("--dataset", default=None, help="JSON dataset (default: built-in)")
    parser.add_argument(
        "--policy",
        choices=["exception", "strict", "permissive"],
        default=None,
        help="Policy for required stdlib -> platform interaction edges",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the API server")
    server_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    server_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    server_parser.add_argument("--workers", type=int, default=1, help="Number of workers")
    server_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    list_parser = subparsers.add_parser("list", help="List registered members")
    list_parser.add_argument("--ring", default=None, help="Only members in this ring")
    list_parser.add_argument("--layer", default=None, help="Only members in this layer")
    list_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    lookup_parser = subparsers.add_parser("lookup", help="Show a member's ring and layer")
    lookup_parser.add_argument("name", help="API member name")
    lookup_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    access_parser = subparsers.add_parser("access", help="Check member accessibility")
    access_parser.add_argument("name", help="API member name")
    access_parser.add_argument("--ring", default=None, help="Selected ring")
    access_parser.add_argument("--layer", default=None, help="Selected layer")
    access_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    closure_parser = subparsers.add_parser("closure", help="Availability closure")
    closure_parser.add_argument("target", help="Layer or optional stdlib component")
    closure_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    check_parser = subparsers.add_parser("check", help="Validate dependency edges")
    check_parser.add_argument("source", nargs="?", help="Depending member")
    check_parser.add_argument("target", nargs="?", help="Member depended upon")
    check_parser.add_argument("--file", "-f", default=None, help="JSON list of [source, target] pairs")
    check_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    return parser


COMMANDS = {
    "serve": cmd_serve,
    "list": cmd_list,
    "lookup": cmd_lookup,
    "access": cmd_access,
    "closure": cmd_closure,
    "check": cmd_check,
}


def main(argv=None):
    """Main CLI entry point."""
    from apirings.config import configure_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    configure_logging()
    try:
        code = command(args)
    except (RegistryError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
