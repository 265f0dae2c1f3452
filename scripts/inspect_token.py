"""Print the claims of a token WITHOUT verifying it (debugging only).

Usage: python scripts/inspect_token.py <token>

The output is untrusted: anyone can forge a payload that decodes here.
Pass --verify to also check it against JWT_SECRET.
"""

import argparse
import json
import os
import sys
from datetime import datetime, timezone

# Add parent directory to path so we can import app modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from app.core.config import get_settings
from app.core.tokens import TokenCodec
from app.main import build_token_codec


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("token")
    parser.add_argument("--verify", action="store_true", help="also verify signature and expiry")
    args = parser.parse_args(argv)

    payload = TokenCodec.decode_unverified(args.token)
    if payload is None:
        print("Token could not be decoded.")
        return 1
    print("UNVERIFIED payload:")
    print(json.dumps(payload, indent=2, sort_keys=True))
    if "exp" in payload:
        raw_exp = payload["exp"]
        try:
            if isinstance(raw_exp, bool) or not isinstance(raw_exp, (int, float)):
                raise TypeError
            exp = datetime.fromtimestamp(raw_exp, tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            print(f"exp: {raw_exp!r} (not a usable timestamp)")
        else:
            print(f"exp: {exp.isoformat()} ({'expired' if exp < datetime.now(timezone.utc) else 'not expired'})")

    if args.verify:
        claims = build_token_codec(get_settings()).verify(args.token)
        print("Signature/expiry:", "valid" if claims else "INVALID")
        return 0 if claims else 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
