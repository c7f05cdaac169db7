"""Command palette shell (``python -m palette``).

Drives a registry holding the built-in introspection commands from a
terminal. Useful for checking how input parses and ranks.

Features:
 - ``--search QUERY``: ranked command names (with scores when ``--json``)
 - ``--parse INPUT``: resolved name and arguments
 - ``--run INPUT``: execute and print the result
 - no action flag: interactive loop (``?text`` searches, ``!history`` lists
   recent input, ``quit`` leaves)
 - Exit code 0 on success, 1 when the command or its effect failed.

Example:
  python -m palette --search ":h" --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional, TextIO

from .app.bootstrap import PaletteContext, init
from .services.command_errors import CommandError
from .services.error_journal import EFFECT_ERROR_KIND

PROMPT = "palette> "


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "\n".join(str(v) for v in value)
    return "" if value is None else str(value)


def _search_payload(ctx: PaletteContext, query: str) -> List[Dict[str, Any]]:
    if not query.strip():
        return [{"name": c.name, "score": None} for c in ctx.registry.search(query)]
    ranked = ctx.registry.ranked(query)[: ctx.settings.search_limit]
    return [{"name": c.name, "score": score} for score, c in ranked]


def _run(ctx: PaletteContext, text: str, as_json: bool, out: TextIO) -> int:
    try:
        result = asyncio.run(ctx.registry.execute(text))
    except Exception as exc:  # noqa: BLE001 - host effects may raise anything
        kind = exc.kind if isinstance(exc, CommandError) else EFFECT_ERROR_KIND
        if as_json:
            out.write(json.dumps({"error": kind, "message": str(exc)}) + "\n")
        else:
            out.write(f"error: {exc}\n")
        return 1
    if as_json:
        out.write(json.dumps({"result": result}, default=str) + "\n")
    else:
        rendered = _render(result)
        if rendered:
            out.write(rendered + "\n")
    return 0


def _interactive(ctx: PaletteContext, stdin: TextIO, out: TextIO) -> int:
    status = 0
    while True:
        out.write(PROMPT)
        out.flush()
        line = stdin.readline()
        if not line:
            break
        text = line.strip()
        if not text:
            continue
        if text.lower() in ("quit", "exit"):
            break
        if text.startswith("?"):
            for item in _search_payload(ctx, text[1:]):
                out.write(f"  {item['name']}\n")
            continue
        if text == "!history":
            for entry in ctx.registry.history.all():
                out.write(f"  {entry}\n")
            continue
        status = _run(ctx, text, False, out)
    return status


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="palette", description="Command palette shell")
    p.add_argument("--search", metavar="QUERY", help="Rank commands for QUERY")
    p.add_argument("--parse", metavar="INPUT", help="Show how INPUT resolves")
    p.add_argument("--run", metavar="INPUT", help="Execute INPUT")
    p.add_argument("--config", metavar="PATH", help="Settings JSON file")
    p.add_argument("--json", action="store_true", help="Emit JSON output")
    return p


def main(
    argv: Optional[List[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    args = build_parser().parse_args(argv)
    out = stdout or sys.stdout
    ctx = init(config_path=args.config, attach_logging=False)
    try:
        if args.search is not None:
            payload = _search_payload(ctx, args.search)
            if args.json:
                out.write(json.dumps(payload) + "\n")
            else:
                for item in payload:
                    out.write(f"{item['name']}\n")
            return 0
        if args.parse is not None:
            parsed = ctx.registry.parse(args.parse)
            if args.json:
                out.write(
                    json.dumps(
                        {
                            "name": parsed.name,
                            "args": parsed.args,
                            "raw_input": parsed.raw_input,
                            "clean_input": parsed.clean_input,
                        }
                    )
                    + "\n"
                )
            else:
                out.write(f"{parsed.name} {parsed.args}\n")
            return 0
        if args.run is not None:
            return _run(ctx, args.run, args.json, out)
        return _interactive(ctx, stdin or sys.stdin, out)
    finally:
        ctx.shutdown()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
