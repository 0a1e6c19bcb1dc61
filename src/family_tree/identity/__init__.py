from .id_factory import IdFactory, fresh_id, new_member_id

__all__ = ["IdFactory", "fresh_id", "new_member_id"]
