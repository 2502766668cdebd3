#!/usr/bin/env python3
"""
Issue, list and revoke CMS gateway API keys (out of band, never through the gateway)

  python scripts/manage_keys.py issue --tenant t1 --name website --perm pages:read --perm forms:read
  python scripts/manage_keys.py list --tenant t1
  python scripts/manage_keys.py revoke --tenant t1 --key-id key_0123abcd
"""
import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

# Add the repo root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cms_gateway.auth.keys import issue_key, list_keys, revoke_key
from cms_gateway.db import init_db, session_scope
from cms_gateway.schemas.apikey import ApiKeyCreate, ApiKeyIssued, ApiKeyOut


def _issue(args) -> int:
    try:
        payload = ApiKeyCreate(
            tenant_id=args.tenant,
            name=args.name,
            expires_at=args.expires_at,
            **({"permissions": args.perm} if args.perm else {}),
        )
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    with session_scope() as db:
        try:
            key, secret = issue_key(db, payload.tenant_id, payload.name, payload.permissions, payload.expires_at)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        issued = ApiKeyIssued(api_key=secret, **key.to_dict())

    print(issued.model_dump_json(indent=2))
    print("\nAPI key shown once; store it now.", file=sys.stderr)
    return 0


def _list(args) -> int:
    with session_scope() as db:
        keys = [ApiKeyOut(**k).model_dump() for k in list_keys(db, args.tenant)]
    print(json.dumps({"keys": keys, "total": len(keys)}, indent=2))
    return 0


def _revoke(args) -> int:
    with session_scope() as db:
        if not revoke_key(db, args.key_id, args.tenant):
            print(f"API key not found: {args.key_id}", file=sys.stderr)
            return 1
    print(json.dumps({"status": "revoked", "key_id": args.key_id}))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("issue", help="create a key and print it once")
    p.add_argument("--tenant", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--perm", action="append", help="permission, repeatable (default: read-only set)")
    p.add_argument("--expires-at", dest="expires_at", help="ISO-8601 expiry timestamp")
    p.set_defaults(func=_issue)

    p = sub.add_parser("list", help="list keys for a tenant")
    p.add_argument("--tenant", required=True)
    p.set_defaults(func=_list)

    p = sub.add_parser("revoke", help="deactivate a key")
    p.add_argument("--tenant", required=True)
    p.add_argument("--key-id", dest="key_id", required=True)
    p.set_defaults(func=_revoke)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    init_db()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
