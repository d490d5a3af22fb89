"""
Table shapes the seeders write against.

The schema itself belongs to the API's migrations. These definitions only describe the columns
seeding reads and writes; tests use `metadata.create_all` to get a throwaway copy.
"""

from __future__ import annotations

import sqlalchemy as sa


metadata = sa.MetaData()


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


categories = sa.Table(
    "categories",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("slug", sa.Text(), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    *_timestamps(),
)

products = sa.Table(
    "products",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True),
    sa.Column("category_id", sa.Uuid(), sa.ForeignKey("categories.id"), nullable=False),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("sku", sa.Text(), nullable=False),
    sa.Column("price", sa.Numeric(12, 2, asdecimal=False), nullable=False),
    sa.Column("stock", sa.Integer(), nullable=False),
    sa.Column("in_stock", sa.Boolean(), nullable=False),
    *_timestamps(),
)

users = sa.Table(
    "users",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True),
    sa.Column("email", sa.Text(), nullable=False, unique=True),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("password_hash", sa.Text(), nullable=False),
    sa.Column("role", sa.Text(), nullable=False),
    *_timestamps(),
)

orders = sa.Table(
    "orders",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True),
    sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("total", sa.Numeric(12, 2, asdecimal=False), nullable=False),
    sa.Column("status", sa.Text(), nullable=False),
    # JSON text, e.g. {"street": ..., "city": ..., "zip": ...}
    sa.Column("shipping_address", sa.Text(), nullable=True),
    sa.Column("billing_address", sa.Text(), nullable=True),
    *_timestamps(),
)

order_items = sa.Table(
    "order_items",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True),
    sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
    sa.Column("product_id", sa.Uuid(), sa.ForeignKey("products.id"), nullable=False),
    sa.Column("quantity", sa.Integer(), nullable=False),
    sa.Column("price", sa.Numeric(12, 2, asdecimal=False), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
)

reviews = sa.Table(
    "reviews",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True),
    sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("product_id", sa.Uuid(), sa.ForeignKey("products.id"), nullable=False),
    sa.Column("rating", sa.Integer(), nullable=False),
    sa.Column("comment", sa.Text(), nullable=True),
    *_timestamps(),
)
