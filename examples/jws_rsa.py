"""Sign with an RSA private key, then verify with the matching and an unrelated public key.

Usage: python examples/jws_rsa.py PRIVATE_KEY PUBLIC_KEY OTHER_PUBLIC_KEY [PASSPHRASE]
Keys are PEM files; public keys may also be X.509 certificates.
"""

import json
import sys
import time
import uuid

from jws_compact import JwsError, RsaJws


def main(argv):
    if len(argv) < 3:
        print(__doc__)
        return 2
    private_key, public_key, other_public_key = argv[:3]
    passphrase = argv[3] if len(argv) > 3 else None

    header = {"typ": "JWT", "alg": "", "x5u": ""}
    now = int(time.time())
    payload_data = {
        "iss": "https://issuer.com",
        "sub": "subject@something.com",
        "aud": "https://audience.com",
        "exp": now + 86400,
        "nbf": now,
        "iat": now,
        "jti": uuid.uuid4().hex,
    }

    with RsaJws() as jws:
        if not jws.set_private_key(f"file://{private_key}", passphrase):
            print("Unable to load private key")
            return 1
        token = jws.sign(json.dumps(payload_data), header)
        print("\n--- BEGIN JWT ---\n" + token + "\n---- END JWT ----")

        jws.set_public_key(f"file://{public_key}")
        print("\nVerifying JWT with right public key:")
        print("JWT is " + ("VALID" if jws.verify(token) else "NOT VALID"))

        jws.set_public_key(f"file://{other_public_key}")
        print("\nVerifying JWT with wrong public key:")
        print("JWT is " + ("VALID" if jws.verify(token) else "NOT VALID"))

        print(f"\nHeader => {jws.get_header(token)}")
        print(f"Payload => {json.loads(jws.get_payload(token))}")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main(sys.argv[1:]))
    except JwsError as exc:
        print(f"Error ({int(exc.code)}): {exc.message}")
        sys.exit(1)
