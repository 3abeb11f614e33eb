#!/usr/bin/env python3
"""Mini CRM command line interface."""
from __future__ import annotations

import argparse
import logging
import sys

from mini_crm.config import STORE_BACKENDS, ConfigError, load_settings
from mini_crm.contacts import ContactStore, format_contact_detail, format_contact_rows
from mini_crm.docstore import get_document_store
from mini_crm.errors import CRMError, NotFoundError, ValidationError

# (flag, store field) pairs shared by ``add`` and ``edit``.
CONTACT_OPTIONS = (
    ("--last-name", "last_name"),
    ("--email", "email"),
    ("--phone", "phone"),
    ("--title", "title"),
    ("--company-id", "company_id"),
    ("--owner-id", "owner_id"),
    ("--image", "image"),
)


def _add_contact_options(parser: argparse.ArgumentParser) -> None:
    for flag, dest in CONTACT_OPTIONS:
        parser.add_argument(flag, dest=dest, default=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mini-crm",
        description="Manage CRM contacts from the command line.",
    )
    parser.add_argument(
        "--backend",
        choices=STORE_BACKENDS,
        help="Override CRM_STORE_BACKEND for this run. memory keeps nothing after exit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List contacts.")
    list_parser.add_argument("--search", help="Filter by name, email or phone.")
    list_parser.add_argument("--owner-id", help="Only contacts managed by this user id.")

    show_parser = subparsers.add_parser("show", help="Show a single contact.")
    show_parser.add_argument("contact_id")

    add_parser = subparsers.add_parser("add", help="Create a contact.")
    add_parser.add_argument("first_name")
    _add_contact_options(add_parser)

    edit_parser = subparsers.add_parser(
        "edit",
        help="Update a contact. Only the options given are changed.",
    )
    edit_parser.add_argument("contact_id")
    edit_parser.add_argument("--first-name", dest="first_name", default=None)
    _add_contact_options(edit_parser)
    edit_parser.add_argument(
        "--clear",
        action="append",
        default=[],
        metavar="FIELD",
        help="Clear an optional field (repeatable), e.g. --clear phone.",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a contact.")
    delete_parser.add_argument("contact_id")

    return parser


def _supplied(args: argparse.Namespace, names: list[str]) -> dict:
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


def _cmd_list(store: ContactStore, search: str | None, owner_id: str | None) -> int:
    if owner_id:
        contacts = store.list_by_owner(owner_id)
        if search:
            contacts = [c for c in contacts if c.matches(search)]
    else:
        contacts = store.search(search or "")

    if not contacts:
        print("No contacts found." if search or owner_id else "No contacts yet.")
        return 0

    contacts.sort(key=lambda c: (c.first_name.lower(), (c.last_name or "").lower()))
    print(format_contact_rows(contacts))
    print(f"\n{len(contacts)} contact(s)")
    return 0


def _cmd_show(store: ContactStore, contact_id: str) -> int:
    contact = store.get(contact_id)
    if not contact:
        print(f"Contact {contact_id} not found.", file=sys.stderr)
        return 1
    print(format_contact_detail(contact))
    return 0


def _cmd_add(store: ContactStore, args: argparse.Namespace) -> int:
    fields = _supplied(args, [dest for _, dest in CONTACT_OPTIONS])
    contact_id = store.create(args.first_name, **fields)
    print(f"Created contact {contact_id}")
    return 0


def _cmd_edit(store: ContactStore, args: argparse.Namespace) -> int:
    fields = _supplied(args, ["first_name"] + [dest for _, dest in CONTACT_OPTIONS])
    for name in args.clear:
        fields[name.replace("-", "_")] = None
    if not fields:
        print("Nothing to update.", file=sys.stderr)
        return 1

    contact = store.edit(args.contact_id, fields)
    print(format_contact_detail(contact))
    return 0


def _cmd_delete(store: ContactStore, contact_id: str) -> int:
    if store.delete(contact_id):
        print(f"Deleted contact {contact_id}")
    else:
        print(f"Contact {contact_id} was already gone.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    if args.backend:
        settings.store_backend = args.backend

    logging.basicConfig(
        level="DEBUG" if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        store = ContactStore(get_document_store(settings))
    except Exception as exc:
        print(f"Failed to open store: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command == "list":
            return _cmd_list(store, search=args.search, owner_id=args.owner_id)
        if args.command == "show":
            return _cmd_show(store, args.contact_id)
        if args.command == "add":
            return _cmd_add(store, args)
        if args.command == "edit":
            return _cmd_edit(store, args)
        if args.command == "delete":
            return _cmd_delete(store, args.contact_id)
    except (ValidationError, NotFoundError) as exc:
        print(exc, file=sys.stderr)
        return 1
    except CRMError as exc:
        print(f"Failed to {args.command} contact: {exc}", file=sys.stderr)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
