"""
Session Service package.

Exposes the FastAPI application that mints and verifies signed session
tokens for the channels that front end users.

- app.main: Application entrypoint that wires routes and lifecycle.
- app.tokens: Token signing, minting and verification.
- app.keystore: Secret resolvers keyed by (source id, manager id).

Design notes:
- Module import must not read secrets or touch the network; resolvers are
  built when the service is constructed.
- Use the shared/ utilities for logging, metrics, config, and errors.
- The service is stateless; tokens are never stored.
"""
