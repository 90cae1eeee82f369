# syncpos/database/repositories/settings_repo.py
from __future__ import annotations

from typing import Optional

from ...dto import SettingDTO
from .base import SyncRepo


class SettingsRepo(SyncRepo[SettingDTO]):
    table = "settings"
    dto_cls = SettingDTO

    def get_value(self, key: str, tenant_id: str, default: Optional[str] = None) -> Optional[str]:
        row = self._fetch_one(
            "setting_key = ? AND tenant_id = ? AND is_deleted = 0", (key, tenant_id)
        )
        return row.setting_value if row else default

    def set_value(self, key: str, value: Optional[str], tenant_id: str) -> SettingDTO:
        """Create or update one key; either way the row becomes unsynced."""
        row = self._fetch_one("setting_key = ? AND tenant_id = ? AND is_deleted = 0", (key, tenant_id))
        if row is None:
            return self.create_local(SettingDTO(setting_key=key, setting_value=value), tenant_id)
        row.setting_value = value
        self.update_local(row, tenant_id)
        return self.get_by_id(row.local_id, tenant_id)
