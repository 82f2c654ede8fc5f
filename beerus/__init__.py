"""
Beerus RPC Package

JSON-RPC translation and dispatch layer over the Beerus light clients.
Core imports are lazily loaded so that importing a submodule does not pull
in the web stack:

    from beerus.rpc.codec import decode_address
    from beerus.lightclient import BeerusLightClient
    from beerus.exceptions import DecodeError
"""

# Lazy imports to avoid loading everything at package import
def __getattr__(name):
    """Lazy module loading."""
    if name == 'BeerusLightClient':
        from .lightclient import BeerusLightClient
        return BeerusLightClient
    elif name == 'create_app':
        from .node.main import create_app
        return create_app
    elif name == 'load_config':
        from .config import load_config
        return load_config
    raise AttributeError(f"module 'beerus' has no attribute {name!r}")

__all__ = ['BeerusLightClient', 'create_app', 'load_config']
