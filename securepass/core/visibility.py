from .models import VaultRecord

MASK = "•" * 12


def reveal_secret(record: VaultRecord) -> str:
    """Raw secret for the copy action, whatever the current mask state."""
    if not record.kind.has_secret:
        raise ValueError(f"{record.kind.singular} records carry no secret")
    return record.secret_value  # type: ignore[attr-defined]


class VisibilityState:
    """Per-record show/hide flags for secret values.

    Lives only as long as the session that owns it; never written to the store.
    """

    def __init__(self):
        self._visible: dict[str, bool] = {}

    def is_visible(self, record_id: str) -> bool:
        return self._visible.get(record_id, False)

    def toggle(self, record_id: str) -> bool:
        self._visible[record_id] = not self.is_visible(record_id)
        return self._visible[record_id]

    def render(self, record: VaultRecord) -> str:
        if self.is_visible(record.id):
            return reveal_secret(record)
        return MASK

    def clear(self):
        self._visible.clear()
