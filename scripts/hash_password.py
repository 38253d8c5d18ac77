"""Print a bcrypt hash of the gate password, for GATE_PASSWORD_HASH in .env.

Usage:
    python scripts/hash_password.py            # prompts, nothing lands in shell history
    python scripts/hash_password.py PASSWORD
"""
import getpass
import sys

from passgate.infrastructure.auth.secret import SecretVerifier, hash_secret


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        password = argv[0]
    else:
        password = getpass.getpass("Gate password: ")
        if password != getpass.getpass("Repeat password: "):
            print("Passwords do not match.", file=sys.stderr)
            return 1
    if not password:
        print("Password must not be empty.", file=sys.stderr)
        return 1

    hashed = hash_secret(password)
    # Sanity check before anyone pastes it into .env
    if not SecretVerifier(secret_hash=hashed).matches(password):
        print("Hash verification failed.", file=sys.stderr)
        return 1
    print(f"GATE_PASSWORD_HASH={hashed}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
