import argparse
import json
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from kii_core import App, KiiError, LayoutPosition
from kii_things import APIAuthor
from kii_things.schemas import (
    KiiModel,
    KiiUserLoginRequest,
    KiiUserRegisterRequest,
    OnboardGatewayRequest,
    PostCommandRequest,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kii-cli",
        description="Call Kii Cloud and thing-if from the command line.",
        epilog="The application is read from KII_APP_ID, KII_APP_KEY and KII_APP_LOCATION. "
               "Commands that need a token read it from KII_TOKEN.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("anonymous-login", help="Login as an anonymous user")

    register = commands.add_parser("register-user", help="Register a KiiUser")
    register.add_argument("login_name")
    register.add_argument("password")

    login = commands.add_parser("login", help="Login as a KiiUser")
    login.add_argument("username")
    login.add_argument("password")

    onboard = commands.add_parser("onboard-gateway", help="Onboard a gateway thing")
    onboard.add_argument("vendor_thing_id")
    onboard.add_argument("password")
    onboard.add_argument("thing_type")

    command = commands.add_parser("post-command", help="Post a command to a thing")
    command.add_argument("thing_id")
    command.add_argument("issuer", help='Command issuer, e.g. "user:<user-id>"')
    command.add_argument("schema")
    command.add_argument("schema_version", type=int)
    command.add_argument("actions", help="JSON array of actions")

    return parser


def load_app() -> Optional[App]:
    """Read the application from the environment."""
    try:
        return App(
            app_id=os.environ["KII_APP_ID"],
            app_key=os.environ["KII_APP_KEY"],
            app_location=os.environ["KII_APP_LOCATION"],
        )
    except KeyError as e:
        print(f"Error: environment variable {e.args[0]} is not set")
        return None


def run_command(author: APIAuthor, args: argparse.Namespace) -> KiiModel:
    if args.command == "anonymous-login":
        return author.anonymous_login()
    if args.command == "register-user":
        return author.register_kii_user(KiiUserRegisterRequest(login_name=args.login_name, password=args.password))
    if args.command == "login":
        return author.login_as_kii_user(KiiUserLoginRequest(username=args.username, password=args.password))
    if args.command == "onboard-gateway":
        return author.onboard_gateway(OnboardGatewayRequest(
            vendor_thing_id=args.vendor_thing_id,
            thing_password=args.password,
            thing_type=args.thing_type,
            layout_position=LayoutPosition.GATEWAY.value,
        ))
    if args.command == "post-command":
        return author.post_command(args.thing_id, PostCommandRequest(
            issuer=args.issuer,
            actions=json.loads(args.actions),
            schema_name=args.schema,
            schema_version=args.schema_version,
        ))
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    app = load_app()
    if app is None:
        return 1

    author = APIAuthor(app, token=os.environ.get("KII_TOKEN", ""))

    try:
        response = run_command(author, args)
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"Error: invalid arguments: {e}")
        return 1
    except KiiError as e:
        print(f"Error: {args.command} failed: {e}")
        return 1

    print(json.dumps(response.to_wire(), indent=2))
    if author.token and args.command in ("anonymous-login", "login", "onboard-gateway"):
        print(f"\nexport KII_TOKEN={author.token}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
