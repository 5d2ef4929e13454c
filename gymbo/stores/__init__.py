from gymbo.stores.session_store import SessionStore, StoreEvent, StoreEventKind

__all__ = ["SessionStore", "StoreEvent", "StoreEventKind"]
