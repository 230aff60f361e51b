from studysessions.stores.interfaces import SessionStore, UserStore

__all__ = ["SessionStore", "UserStore"]
