from sqlalchemy import Column, Integer, String
from database import Base
from models.audit_mixin import TimestampMixin

class AppConfig(Base, TimestampMixin):
    """Runtime settings such as PENALTY_AMOUNT_ENABLED and VAT_RATE.

    A row here takes precedence over the environment variable of the same name.
    """
    __tablename__ = "app_config"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    value = Column(String(255), nullable=False) # parsed by crud.app_config.get_bool_setting / get_decimal_setting
