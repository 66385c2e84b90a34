"""Adapters connecting the sync pipeline to RPC nodes, the subgraph and the database."""
