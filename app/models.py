from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from .database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class TimestampMixin:
    # Valores calculados en Python: no quedan expirados tras el commit
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)


category_product = Table(
    "category_product",
    Base.metadata,
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)


# --- USUARIOS ---
class Role(TimestampMixin, Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    users = relationship("User", back_populates="role")


class User(TimestampMixin, Base):
    """
    Cuenta de acceso a la API.

    Attributes:
        deleted_at: Marca de borrado lógico. Un usuario nunca se elimina físicamente.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True) # Clientes creados sin contraseña
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    role = relationship("Role", back_populates="users")
    customer = relationship("Customer", back_populates="user", uselist=False)


class Customer(TimestampMixin, Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    user = relationship("User", back_populates="customer")
    addresses = relationship("Address", back_populates="customer", order_by="Address.id")


class Address(TimestampMixin, Base):
    """
    Dirección de envío de un cliente.

    Attributes:
        is_default: Dirección por defecto. Columna histórica `id_default`;
            a lo sumo una por cliente, exactamente una si el cliente tiene direcciones.
    """
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    street1 = Column(String, nullable=False)
    street2 = Column(String, nullable=True)
    city = Column(String, nullable=False)
    zip = Column(String, nullable=False)
    country = Column(String, nullable=False)
    is_default = Column("id_default", Boolean, nullable=False, default=False)

    customer_id = Column(Integer, ForeignKey("customers.id"), index=True, nullable=False)
    customer = relationship("Customer", back_populates="addresses")


# --- CATÁLOGO ---
class Product(TimestampMixin, Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False)

    categories = relationship(
        "Category", secondary=category_product, back_populates="products", passive_deletes=True
    )


class Category(TimestampMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False)

    products = relationship(
        "Product", secondary=category_product, back_populates="categories", passive_deletes=True
    )


# --- CONFIGURACIÓN ---
class Setting(TimestampMixin, Base):
    """Parámetro clave-valor de la tienda."""
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
