import os
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session
from models.app_config import AppConfig
from schemas.app_config import AppConfigCreate, AppConfigUpdate
import logging

# Audit imports
from crud.audit_log import create_audit_log
from schemas.audit_log import AuditLogCreate
from utils import local_now, sqlalchemy_to_dict

logger = logging.getLogger(__name__)

# Runtime settings and their defaults. An app_config row overrides the
# environment variable of the same name, which overrides the default here.
PENALTY_AMOUNT_ENABLED = "PENALTY_AMOUNT_ENABLED"
VAT_RATE = "VAT_RATE"
RECONCILE_LOCK_ORDERS = "RECONCILE_LOCK_ORDERS"

DEFAULT_SETTINGS = {
    PENALTY_AMOUNT_ENABLED: "true",
    VAT_RATE: "0.05",
    RECONCILE_LOCK_ORDERS: "false",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


# Create a new config entry
def create_config(db: Session, config: AppConfigCreate, user_id: str):
    db_config = AppConfig(name=config.name, value=config.value, created_by=user_id)
    db.add(db_config)
    db.commit()
    db.refresh(db_config)

    # Audit log for creation
    new_values = sqlalchemy_to_dict(db_config)
    log_entry = AuditLogCreate(
        table_name='app_config',
        record_id=db_config.id,
        changed_by=user_id,
        action='CREATE',
        old_values={},
        new_values=new_values
    )
    create_audit_log(db, log_entry)

    return db_config


# Get config by name (or all configs)
def get_config(db: Session, name: str = None):
    if name:
        return db.query(AppConfig).filter(AppConfig.name == name).first()
    return db.query(AppConfig).order_by(AppConfig.name).all()


# Update config by name
def update_config_by_name(db: Session, name: str, config: AppConfigUpdate, user_id: str):
    db_config = db.query(AppConfig).filter(AppConfig.name == name).first()
    if not db_config:
        return None

    old_values = sqlalchemy_to_dict(db_config)
    for field, value in config.model_dump(exclude_unset=True).items():
        setattr(db_config, field, value)
    db_config.updated_at = local_now()
    db_config.updated_by = user_id
    db.commit()
    db.refresh(db_config)

    # Audit log for update by name
    new_values = sqlalchemy_to_dict(db_config)
    log_entry = AuditLogCreate(
        table_name='app_config',
        record_id=db_config.id,
        changed_by=user_id,
        action='UPDATE',
        old_values=old_values,
        new_values=new_values
    )
    create_audit_log(db, log_entry)

    return db_config


def set_config(db: Session, name: str, value: str, user_id: str):
    """Create or update a setting by name."""
    if get_config(db, name=name):
        return update_config_by_name(db, name, AppConfigUpdate(value=value), user_id)
    return create_config(db, AppConfigCreate(name=name, value=value), user_id)


def get_setting(db: Session, name: str) -> str:
    db_config = get_config(db, name=name)
    if db_config is not None:
        return db_config.value
    return os.getenv(name, DEFAULT_SETTINGS.get(name, ""))


def get_bool_setting(db: Session, name: str) -> bool:
    return get_setting(db, name).strip().lower() in _TRUE_VALUES


def get_decimal_setting(db: Session, name: str) -> Decimal:
    raw = get_setting(db, name)
    try:
        return Decimal(raw.strip())
    except (InvalidOperation, AttributeError):
        logger.warning(f"Setting {name} has non-numeric value {raw!r}; using default {DEFAULT_SETTINGS[name]}")
        return Decimal(DEFAULT_SETTINGS[name])
