"""
Token Gateway service package.

The gateway exposes a GraphQL query API over two upstream market data
providers and keeps transformed results in a bounded in-process cache.

Structure:
- app.main: FastAPI app, GraphQL mount and service routes.
- app.adapters: HTTP clients for the upstream providers.
- app.caching: LRU + TTL cache store.
- app.domain: Value objects, payload transforms and field resolvers.
- app.graphql_api: Schema, Date scalar codec and router.
"""
