"""Command-line access to the LetsPeppol APIs.

Configuration comes from LETSPEPPOL_* environment variables (see
LetsPeppolConfig.from_env). Commands other than login and health need a
token in LETSPEPPOL_TOKEN.

Examples:
  letspeppol login admin@company.com
  letspeppol documents --size 20
  letspeppol mark-downloaded doc123 doc456
"""

import argparse
import getpass
import json
import os
import sys

from letspeppol.client import LetsPeppolClient, LetsPeppolError
from letspeppol.config import LetsPeppolConfig
from letspeppol.utils.logging_config import setup_logging


def _print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_login(client, args):
    password = os.environ.get('LETSPEPPOL_PASSWORD') or getpass.getpass('Password: ')
    print(client.authenticate(args.email, password))


def cmd_health(client, args):
    print(client.proxy.health_check())


def cmd_account(client, args):
    _print_json(client.kyc.get_account_info())


def cmd_documents(client, args):
    _print_json(client.proxy.get_all_new_documents(size=args.size))


def cmd_mark_downloaded(client, args):
    if len(args.ids) == 1:
        client.proxy.mark_downloaded(args.ids[0], no_archive=args.no_archive)
    else:
        client.proxy.mark_downloaded_batch(args.ids, no_archive=args.no_archive)
    print(f"Marked {len(args.ids)} document(s) as downloaded")


def build_parser():
    parser = argparse.ArgumentParser(
        prog='letspeppol',
        description='LetsPeppol e-invoicing API client',
    )
    parser.add_argument('--log-file', help='Write request/response log to this file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--json-logs', action='store_true', help='JSON log output')

    sub = parser.add_subparsers(dest='command', required=True)

    login = sub.add_parser('login', help='Authenticate and print the JWT')
    login.add_argument('email')
    login.set_defaults(func=cmd_login)

    sub.add_parser('health', help='Proxy health check').set_defaults(func=cmd_health)
    sub.add_parser('account', help='Show account information').set_defaults(func=cmd_account)

    documents = sub.add_parser('documents', help='List new incoming documents')
    documents.add_argument('--size', type=int, default=100)
    documents.set_defaults(func=cmd_documents)

    mark = sub.add_parser('mark-downloaded', help='Mark documents as downloaded')
    mark.add_argument('ids', nargs='+')
    mark.add_argument('--no-archive', action='store_true')
    mark.set_defaults(func=cmd_mark_downloaded)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    setup_logging(
        level='DEBUG' if args.verbose else 'WARNING',
        json_format=True if args.json_logs else None,
    )

    try:
        config = LetsPeppolConfig.from_env()
        with LetsPeppolClient(config=config, log_file=args.log_file) as client:
            args.func(client, args)
    except LetsPeppolError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
