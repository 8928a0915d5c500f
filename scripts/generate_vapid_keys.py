"""Generate a VAPID key pair for the push settings."""
from __future__ import annotations

import base64

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def generate_vapid_keys() -> tuple[str, str]:
    """Return ``(public, private)`` keys as unpadded base64url strings."""

    private_key = ec.generate_private_key(ec.SECP256R1())
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    private_bytes = private_key.private_numbers().private_value.to_bytes(32, "big")
    return _b64url(public_bytes), _b64url(private_bytes)


def main() -> None:
    public_key, private_key = generate_vapid_keys()
    print("Add these to your .env file:\n")
    print(f"VAPID_PUBLIC_KEY={public_key}")
    print(f"VAPID_PRIVATE_KEY={private_key}")
    print("VAPID_SUBJECT=mailto:you@example.com")


if __name__ == "__main__":
    main()
