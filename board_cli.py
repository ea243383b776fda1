#!/usr/bin/env python3
"""Board agent CLI - talk to the backend, or parse and lay out templates offline."""

import argparse
import json
import sys
import urllib.request
import urllib.error
import urllib.parse
from dataclasses import asdict

API_BASE = "http://127.0.0.1:8765/api"


def _json_out(data):
    print(json.dumps(data))
    sys.exit(0)


def _api_request(method, endpoint, data=None, params=None, timeout=30):
    """Make a request to the board agent backend."""
    url = f"{API_BASE}{endpoint}"

    if params:
        filtered = {k: v for k, v in params.items() if v is not None}
        if filtered:
            url = f"{url}?{urllib.parse.urlencode(filtered)}"

    headers = {"Content-Type": "application/json"}
    body = json.dumps(data).encode() if data is not None else None

    req = urllib.request.Request(url, data=body, headers=headers, method=method)

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return json.loads(response.read().decode())
    except urllib.error.HTTPError as e:
        error_body = e.read().decode()
        try:
            error_data = json.loads(error_body)
            _json_out({"status": "error", "error": f"API error: {error_data.get('detail', 'Unknown error')}"})
        except json.JSONDecodeError:
            _json_out({"status": "error", "error": f"API error ({e.code}): {error_body}"})
    except urllib.error.URLError as e:
        _json_out({"status": "error", "error": f"Connection failed: {e.reason}. Is the board backend running?"})


def _parse_json_arg(value, default=None):
    """Parse a JSON argument or return the default."""
    if value is None:
        return default
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return default


def _read_text(value):
    """`-` reads the argument from stdin."""
    return sys.stdin.read() if value == "-" else value


# ── Backend ──────────────────────────────────────────────────────────────────

def cmd_health(args):
    _json_out(_api_request("GET", "/health"))


def cmd_ask(args):
    history = _parse_json_arg(args.history, [])
    _json_out(_api_request("POST", "/agent", data={
        "message": _read_text(args.message),
        "history": history,
    }, timeout=args.timeout))


def cmd_board(args):
    _json_out(_api_request("GET", "/board"))


def cmd_templates(args):
    result = _api_request("GET", "/templates")
    if args.catalog:
        print(result["catalog"])
        sys.exit(0)
    _json_out(result["templates"])


def cmd_tool(args):
    tool_input = _parse_json_arg(_read_text(args.input))
    if not isinstance(tool_input, dict):
        _json_out({"status": "error", "error": "--input must be a JSON object"})
    _json_out(_api_request("POST", f"/tools/{args.name}", data={"input": tool_input}))


def cmd_apply(args):
    markup = _read_text(args.markup)
    key = "xml" if markup.lstrip().startswith("<") else "dsl"
    tool_input = {key: markup}
    if args.x is not None:
        tool_input["x"] = args.x
    if args.y is not None:
        tool_input["y"] = args.y
    _json_out(_api_request("POST", "/tools/apply_template", data={"input": tool_input}))


def cmd_delete(args):
    _json_out(_api_request("POST", "/tools/delete_object", data={"input": {"object_id": args.ref}}))


# ── Offline ──────────────────────────────────────────────────────────────────

def cmd_dsl(args):
    from board_core.dsl import parse_dsl

    _json_out([asdict(op) for op in parse_dsl(_read_text(args.text))])


def cmd_layout(args):
    from board_core.errors import SlotFillError, TemplateSyntaxError
    from board_core.template_engine import fill_slots, layout_template, measure_template, parse_template
    from board_core.templates import get_template

    markup = get_template(args.name)
    if markup is None:
        _json_out({"status": "error", "error": f"Unknown template: {args.name}"})

    try:
        root = parse_template(markup)
        slots = _parse_json_arg(args.slots)
        if slots:
            fill_slots(root, [s if isinstance(s, list) else [s] for s in slots])
    except (TemplateSyntaxError, SlotFillError) as e:
        _json_out({"status": "error", "error": str(e)})

    width, height = measure_template(root)
    _json_out({
        "name": args.name,
        "width": width,
        "height": height,
        "specs": [spec.model_dump(exclude_none=True) for spec in layout_template(root, args.x, args.y)],
    })


def cmd_label(args):
    from board_core.labels import uuid_to_label

    try:
        _json_out({"id": args.id, "label": uuid_to_label(args.id)})
    except ValueError as e:
        _json_out({"status": "error", "error": str(e)})


# ── Main ─────────────────────────────────────────────────────────────────────

def main():
    parser = argparse.ArgumentParser(description="Board agent CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    # Backend
    sub.add_parser("health")

    p = sub.add_parser("ask")
    p.add_argument("message", help="Request text, or - for stdin")
    p.add_argument("--history", default=None, help="JSON list of prior messages")
    p.add_argument("--timeout", type=float, default=600)

    sub.add_parser("board")

    p = sub.add_parser("templates")
    p.add_argument("--catalog", action="store_true", help="Print the human-readable catalog")

    p = sub.add_parser("tool")
    p.add_argument("name")
    p.add_argument("--input", default="{}", help="JSON tool input, or - for stdin")

    p = sub.add_parser("apply")
    p.add_argument("markup", help="DSL or XML, or - for stdin")
    p.add_argument("--x", type=float, default=None)
    p.add_argument("--y", type=float, default=None)

    p = sub.add_parser("delete")
    p.add_argument("ref", help="Object id or 3-word label")

    # Offline
    p = sub.add_parser("dsl")
    p.add_argument("text", help="DSL text, or - for stdin")

    p = sub.add_parser("layout")
    p.add_argument("name")
    p.add_argument("--slots", default=None, help='JSON list, e.g. ["A", ["B", "B2"]]')
    p.add_argument("--x", type=float, default=0)
    p.add_argument("--y", type=float, default=0)

    p = sub.add_parser("label")
    p.add_argument("id")

    args = parser.parse_args()

    cmd_map = {
        "health": cmd_health,
        "ask": cmd_ask,
        "board": cmd_board,
        "templates": cmd_templates,
        "tool": cmd_tool,
        "apply": cmd_apply,
        "delete": cmd_delete,
        "dsl": cmd_dsl,
        "layout": cmd_layout,
        "label": cmd_label,
    }
    cmd_map[args.command](args)


if __name__ == "__main__":
    main()
