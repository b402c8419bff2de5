"""CLI: object-access get | batch."""
import argparse
import json
import os
import sys

from .client import ObjectAccessClient, ObjectAccessError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="object-access", description="Get signed URLs from the object access API")
    parser.add_argument("--base-url", default=os.environ.get("OBJECT_ACCESS_URL", "http://localhost:8000"), help="API base URL")
    parser.add_argument("--username", default=os.environ.get("OBJECT_ACCESS_USERNAME"), help="Basic auth username")
    parser.add_argument("--password", default=os.environ.get("OBJECT_ACCESS_PASSWORD"), help="Basic auth password")
    sub = parser.add_subparsers(dest="command", required=True)

    p_get = sub.add_parser("get", help="Signed URL for one object")
    p_get.add_argument("bucket", help="Bucket name")
    p_get.add_argument("key", help="Object key")
    p_get.set_defaults(func=cmd_get)

    p_batch = sub.add_parser("batch", help="Signed URLs for several objects")
    p_batch.add_argument("bucket", help="Bucket name")
    p_batch.add_argument("keys", nargs="+", help="Object keys")
    p_batch.set_defaults(func=cmd_batch)

    args = parser.parse_args(argv)
    if not args.username or not args.password:
        print("Error: --username and --password are required", file=sys.stderr)
        return 1
    client = ObjectAccessClient(base_url=args.base_url, username=args.username, password=args.password)
    try:
        return args.func(client, args)
    except ObjectAccessError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()


def cmd_get(client: ObjectAccessClient, args: argparse.Namespace) -> int:
    print(client.get_url(args.bucket, args.key))
    return 0


def cmd_batch(client: ObjectAccessClient, args: argparse.Namespace) -> int:
    out = client.get_urls(args.bucket, args.keys)
    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
