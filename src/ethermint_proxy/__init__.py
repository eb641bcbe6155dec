"""
Hash translation proxy for ethermint chains.

Ethermint blocks carry two identifiers: the tendermint hash assigned by the
consensus layer and the ethereum hash exposed to execution clients. Headers
link to their parent by tendermint hash, which breaks ethereum tooling that
walks the chain by `parentHash`. The proxy records both identifiers for every
block and rewrites headers so the whole chain reads in the ethereum namespace.
"""

__version__ = "0.1.0"
