"""
Backend TZInfer — timezone inference for blockchain addresses.

Fetches recent on-chain activity for each address across several EVM chains,
buckets it into a 24-hour UTC histogram and scores candidate UTC offsets by how
much activity lands in plausible waking hours. Modular layout: activity fetching,
analysis engine, worker pools, result cache and API server.
"""

__version__ = "0.1.0"
