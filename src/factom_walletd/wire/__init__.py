"""
Wire formats - walletd JSON-RPC replies and the schemas that check them.
"""
