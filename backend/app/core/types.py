"""Custom SQLAlchemy types shared by the models"""
from sqlalchemy import TypeDecorator, String, JSON, Enum as SQLEnum
import uuid


def generate_uuid():
    """Generate a UUID string"""
    return str(uuid.uuid4())


class GUID(TypeDecorator):
    """Platform-independent GUID type that stores UUIDs as VARCHAR(36)"""
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return str(value)
        return value


class LowerCaseString(TypeDecorator):
    """String column that normalizes to trimmed lower case (emails)"""
    impl = String(255)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value).strip().lower()
        return value


class JSONList(TypeDecorator):
    """JSON column that always reads back as a list"""
    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return []
        return list(value)

    def process_result_value(self, value, dialect):
        return value or []


def sql_enum(enum_cls, length: int = 50):
    """Enum column storing member values (e.g. "in-progress") as VARCHAR"""
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=length,
        validate_strings=True,
    )
