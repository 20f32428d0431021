#!/usr/bin/env python3
"""
Cli interface for edgesite

    python -m edgesite synth [--certificate] [--json]
    python -m edgesite deploy [--execute] [--no-wait]
    python -m edgesite delete [--execute]
    python -m edgesite outputs
"""
import argparse
import sys

from .config import DomainConfig
from .exceptions import EdgesiteError
from .utils import get_logger
from .website import Site


logger = get_logger(__name__)


def build_parser():
    """Arguments shared by every command, then one sub parser per command."""
    parser = argparse.ArgumentParser(
        prog="edgesite", description="Static website on S3 and CloudFront."
    )
    parser.add_argument("--domain", help="bare domain, defaults to EDGESITE_DOMAIN")
    parser.add_argument("--account", help="account id, defaults to the caller")
    parser.add_argument("--region", help="region of the site stack")
    parser.add_argument("--zone-id", help="hosted zone id, looked up when omitted")
    parser.add_argument(
        "--access-binding",
        choices=["control", "identity"],
        help="how the distribution is allowed to read the bucket",
    )
    parser.add_argument(
        "--no-rewrite",
        dest="rewrite_urls",
        action="store_const",
        const=False,
        help="do not attach the pretty url viewer request function",
    )
    parser.add_argument("--removal-policy", choices=["destroy", "retain"])

    commands = parser.add_subparsers(dest="command", required=True)

    synth = commands.add_parser("synth", help="print a template")
    synth.add_argument("--json", action="store_true", help="json instead of yaml")
    synth.add_argument(
        "--certificate", action="store_true", help="the certificate stack template"
    )

    for name in ["deploy", "delete"]:
        command = commands.add_parser(name, help=f"{name} both stacks")
        command.add_argument(
            "--execute", action="store_true", help="apply changes, dry run otherwise"
        )
        command.add_argument("--no-wait", dest="wait", action="store_false")

    commands.add_parser("outputs", help="print outputs of the site stack for CI")
    return parser


def synth(site, args):
    if args.certificate:
        stack = site.certificate_stack
    else:
        stack = site.site_stack(site.certificate_arn(dryrun=True))
    print(stack.json if args.json else stack.yaml)


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        config = DomainConfig.from_environment(
            domain=args.domain,
            account=args.account,
            region=args.region,
            access_binding=args.access_binding,
            rewrite_urls=args.rewrite_urls,
            removal_policy=args.removal_policy,
        )
        site = Site(config, zone_id=args.zone_id)

        if args.command == "synth":
            synth(site, args)
        elif args.command == "deploy":
            site.deploy(dryrun=not args.execute, wait=args.wait)
        elif args.command == "delete":
            site.delete(dryrun=not args.execute, wait=args.wait)
        elif args.command == "outputs":
            for key, value in sorted(site.outputs().items()):
                print(f"{key}={value}")
    except EdgesiteError as error:
        logger.error(str(error))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
