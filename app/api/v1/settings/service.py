"""System settings (key -> JSON value). Admin only; every change is audited."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFound
from app.core.logging import get_logger
from app.core.models import SystemSetting
from app.ledger import AuditLogger, snapshot

from .schemas import SettingResponse

logger = get_logger(__name__)


async def list_settings(db: AsyncSession) -> List[SettingResponse]:
    result = await db.execute(select(SystemSetting).order_by(SystemSetting.key))
    return [SettingResponse.model_validate(s) for s in result.scalars().all()]


async def get_setting(db: AsyncSession, key: str) -> SettingResponse:
    result = await db.execute(select(SystemSetting).where(SystemSetting.key == key))
    setting: Optional[SystemSetting] = result.scalar_one_or_none()
    if setting is None:
        raise NotFound(f"Setting '{key}' not found")
    return SettingResponse.model_validate(setting)


async def upsert_setting(
    db: AsyncSession,
    key: str,
    value: Any,
    changed_by: Optional[UUID],
) -> SettingResponse:
    key = key.strip()
    result = await db.execute(select(SystemSetting).where(SystemSetting.key == key))
    setting: Optional[SystemSetting] = result.scalar_one_or_none()
    now = datetime.utcnow()
    try:
        if setting is None:
            setting = SystemSetting(key=key, value=value, created_at=now, updated_at=now)
            db.add(setting)
            await db.flush()
            await AuditLogger(db).record(changed_by, "setting", "insert", None, snapshot(setting), entity_id=setting.id)
        else:
            before = snapshot(setting)
            setting.value = value
            setting.updated_at = now
            await db.flush()
            await AuditLogger(db).record(changed_by, "setting", "update", before, snapshot(setting), entity_id=setting.id)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(setting)
    logger.info("setting_updated", key=key, changed_by=str(changed_by) if changed_by else None)
    return SettingResponse.model_validate(setting)
