"""Site settings endpoints."""
from fastapi import APIRouter, Depends

from ..auth import require_admin
from ..dependencies import get_settings_store
from ..schemas import MessageModel, SettingEntryModel, SettingUpdate
from ..stores.settings_store import SettingsStore

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=dict[str, SettingEntryModel])
def read_settings(
    store: SettingsStore = Depends(get_settings_store),
) -> dict[str, SettingEntryModel]:
    """Return every setting with its description."""
    return store.read_all()


@router.post("", response_model=MessageModel, dependencies=[Depends(require_admin)])
def update_setting(
    update: SettingUpdate,
    store: SettingsStore = Depends(get_settings_store),
) -> MessageModel:
    """Upsert the value of one known setting."""

    value = update.value
    if isinstance(value, bool):
        value = "true" if value else "false"
    elif value is not None:
        value = str(value)

    store.update(update.key, value)
    return MessageModel(message="Setting updated successfully")
