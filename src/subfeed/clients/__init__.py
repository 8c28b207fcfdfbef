from subfeed.clients.table import TableClient

__all__ = ["TableClient"]
