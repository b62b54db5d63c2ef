import contextlib

import anyio

from coreason_openid import LoggingComplianceListener, OpenIdConfiguration, OpenIdConfigurationError


def main() -> None:
    """
    Demonstrates building a Relying Party configuration.
    Includes:
    - Trusted endpoints (no network access)
    - Discovery against a provider's well-known document
    - Compliance listener for issuer mismatches
    """
    print(">>> Trusted endpoints")
    trusted = OpenIdConfiguration.build(
        "https://auth.example.com",
        "https://auth.example.com/authorize",
        "https://auth.example.com/oauth/token",
        client_id="my-client",
        client_secret="my-secret",
    )
    trusted.add_scopes("openid", "profile")
    print(f"    {trusted!r}")
    print(f"    scopes: {list(trusted.scopes)}")

    print(">>> Discovery")
    listener = LoggingComplianceListener()
    try:
        discovered = OpenIdConfiguration.build(
            "https://accounts.google.com",
            client_id="my-client",
            compliance_listener=listener,
        )
        print(f"    authorization_endpoint: {discovered.authorization_endpoint}")
        print(f"    token_endpoint: {discovered.token_endpoint}")
    except OpenIdConfigurationError as e:
        # Without network access this fails with the wrapped transport error
        print(f">>> Expected failure (no network): {e}")

    print(f">>> Compliance violations: {len(listener.violations)}")


async def main_async() -> None:
    """The same discovery from inside an event loop."""
    with contextlib.suppress(OpenIdConfigurationError):
        config = await OpenIdConfiguration.build_async("https://accounts.google.com")
        print(f">>> Async discovery: {config.token_endpoint}")


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        main()
        anyio.run(main_async)
