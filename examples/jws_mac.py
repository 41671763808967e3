"""Sign a JWT-style payload with HS256 and verify it with the right and wrong secret."""

import sys
import time
import uuid

from jws_compact import JwsError, MacJws

SECRET_ONE = "8AA829AC3E1FAF5B75C1EC67A610670FFE56BF37"
SECRET_TWO = "6FB2486F46632DFC171B36ED64E9FA1BAE06FC29"

# Registered header parameters, RFC 7515 section 4.1; empty values are dropped.
HEADER = {"typ": "JWT", "alg": "", "cty": ""}


def main():
    now = int(time.time())
    # Registered claims, RFC 7519 section 4.1
    payload = {
        "iss": "https://issuer.com",
        "sub": "subject@something.com",
        "aud": "https://audience.com",
        "exp": now + 86400,
        "nbf": now,
        "iat": now,
        "jti": uuid.uuid4().hex,
    }

    with MacJws(SECRET_ONE) as jws:
        token = jws.sign(payload, HEADER)
        print("\n--- BEGIN JWT ---\n" + token + "\n---- END JWT ----")

        print("\nVerifying JWT with right secret key:")
        print("JWT is " + ("VALID" if jws.verify(token) else "NOT VALID"))

        jws.set_secret_key(SECRET_TWO)
        print("\nVerifying JWT with wrong secret key:")
        print("JWT is " + ("VALID" if jws.verify(token) else "NOT VALID"))

        print(f"\nHeader => {jws.get_header(token)}")
        print(f"Payload => {jws.get_payload(token)}")


if __name__ == "__main__":
    try:
        main()
    except JwsError as exc:
        print(f"Error ({int(exc.code)}): {exc.message}")
        cause = exc.__cause__
        while cause is not None:
            print(f"\tCaused by: {cause!r}")
            cause = cause.__cause__
        sys.exit(1)
