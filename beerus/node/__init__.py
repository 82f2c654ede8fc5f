from .main import build_light_client, check_chain_id, create_app

__all__ = ["build_light_client", "check_chain_id", "create_app"]
