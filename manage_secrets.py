#!/usr/bin/env python3
"""
CLI utility for managing encrypted secrets.
Usage:
    python manage_secrets.py generate-key
    python manage_secrets.py encrypt <value> [--key <key>]
    python manage_secrets.py decrypt <value> [--key <key>]
    python manage_secrets.py set <NAME> <value> [--config local-config.yml]
    python manage_secrets.py migrate-env [--env-file .env] [--config local-config.yml]
"""

import argparse
import os
import sys
from pathlib import Path

import yaml
from cryptography.fernet import Fernet, InvalidToken
from dotenv import dotenv_values, load_dotenv

# Load env vars to get MASTER_KEY if available
load_dotenv(".env")

# Sensitive values, stored encrypted under ``secrets:``
SECRETS_TO_MIGRATE = [
    "SUPABASE_SERVICE_KEY",
    "DATABASE_URL",
]

# Non-secret config, stored as plaintext under ``config:``
CONFIG_TO_MIGRATE = [
    "PROJECT_NAME",
    "FRONTEND_HOST",
    "SUPABASE_URL",
    "STORAGE_BACKEND",
    "JSON_DB_PATH",
    "BUSINESS_TIMEZONE",
    "DEFAULT_PRICING_STRATEGY",
]


def default_config_path() -> Path:
    return Path(f"{os.getenv('ENVIRONMENT', 'local')}-config.yml")


def resolve_key(key: str | None = None) -> str:
    key = key or os.getenv("MASTER_KEY")
    if not key:
        print("Error: No MASTER_KEY found in environment or provided as argument.")
        sys.exit(1)
    return key


def generate_key() -> str:
    """Generates a new valid Fernet key."""
    return Fernet.generate_key().decode()


def encrypt_value(value: str, key: str) -> str:
    return Fernet(key.encode()).encrypt(value.encode()).decode()


def decrypt_value(value: str, key: str) -> str:
    return Fernet(key.encode()).decrypt(value.encode()).decode()


def load_config_file(path: Path) -> dict:
    if not path.exists():
        return {"config": {}, "secrets": {}}
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    data.setdefault("config", {})
    data.setdefault("secrets", {})
    return data


def write_config_file(path: Path, data: dict) -> None:
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def set_secret(path: Path, name: str, value: str, key: str) -> None:
    """Encrypts ``value`` and stores it as ``secrets.<name>`` in the config file."""
    data = load_config_file(path)
    data["secrets"][name] = encrypt_value(value, key)
    write_config_file(path, data)


def migrate_env(env_file: Path, path: Path, key: str) -> dict:
    """Moves settings from a .env file into the YAML config, encrypting secrets."""
    env_values = dotenv_values(env_file)
    data = load_config_file(path)

    for name in CONFIG_TO_MIGRATE:
        if env_values.get(name):
            data["config"][name] = env_values[name]
            print(f"Config: {name}")

    for name in SECRETS_TO_MIGRATE:
        if env_values.get(name):
            data["secrets"][name] = encrypt_value(env_values[name], key)
            print(f"Secret: {name} -> encrypted")

    write_config_file(path, data)
    return data


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Manage encrypted secrets")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("generate-key", help="Generate a new MASTER_KEY")

    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt a string")
    encrypt_parser.add_argument("value", help="Value to encrypt")
    encrypt_parser.add_argument("--key", help="MASTER_KEY to use (optional if in env)")

    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt a string")
    decrypt_parser.add_argument("value", help="Value to decrypt")
    decrypt_parser.add_argument("--key", help="MASTER_KEY to use (optional if in env)")

    set_parser = subparsers.add_parser("set", help="Store an encrypted secret in the config file")
    set_parser.add_argument("name", help="Setting name, e.g. SUPABASE_SERVICE_KEY")
    set_parser.add_argument("value", help="Plaintext value")
    set_parser.add_argument("--config", type=Path, default=None)
    set_parser.add_argument("--key", help="MASTER_KEY to use")

    migrate_parser = subparsers.add_parser("migrate-env", help="Move .env values into the config file")
    migrate_parser.add_argument("--env-file", type=Path, default=Path(".env"))
    migrate_parser.add_argument("--config", type=Path, default=None)
    migrate_parser.add_argument("--key", help="MASTER_KEY to use")

    args = parser.parse_args(argv)

    if args.command == "generate-key":
        key = generate_key()
        print(f"Generated MASTER_KEY: {key}")
        print("\nAdd this to your .env file as:")
        print(f"MASTER_KEY={key}")
    elif args.command == "encrypt":
        print(f"Encrypted value:\n{encrypt_value(args.value, resolve_key(args.key))}")
    elif args.command == "decrypt":
        try:
            print(f"Decrypted value:\n{decrypt_value(args.value, resolve_key(args.key))}")
        except InvalidToken:
            print("Decryption failed: wrong key or corrupted value")
            sys.exit(1)
    elif args.command == "set":
        path = args.config or default_config_path()
        set_secret(path, args.name, args.value, resolve_key(args.key))
        print(f"Stored encrypted {args.name} in {path}")
    elif args.command == "migrate-env":
        path = args.config or default_config_path()
        migrate_env(args.env_file, path, resolve_key(args.key))
        print(f"\nMigration complete! {path} updated.")
        print("Remove the migrated secrets from .env and keep only MASTER_KEY there.")
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
